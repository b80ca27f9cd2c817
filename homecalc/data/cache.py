"""Best-effort Redis cache for external provider responses.

Used for ZIP lookups so repeat requests skip the provider round trip.
Redis is optional: a failed read is a miss and a failed write is dropped.
"""

import functools
import hashlib
import json
import logging
from typing import Any, Callable

import redis.asyncio as redis

from homecalc.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "homecalc"

_redis_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def make_key(namespace: str, args: tuple, kwargs: dict) -> str:
    """``homecalc:<namespace>:<digest>`` over the stringified call arguments."""
    payload = json.dumps([[str(a) for a in args], {k: str(v) for k, v in kwargs.items()}], sort_keys=True)
    return f"{KEY_PREFIX}:{namespace}:{hashlib.sha256(payload.encode()).hexdigest()[:16]}"


async def _read(key: str) -> Any | None:
    try:
        r = await get_redis()
        raw = await r.get(key)
    except Exception as e:
        logger.warning("Redis read failed for %s: %s", key, e)
        return None
    if raw is None:
        return None
    logger.debug("Redis hit: %s", key)
    return json.loads(raw)


async def _write(key: str, value: Any, ttl_seconds: int) -> None:
    try:
        r = await get_redis()
        await r.setex(key, ttl_seconds, json.dumps(value, default=str))
    except Exception as e:
        logger.warning("Redis write failed for %s: %s", key, e)


def cached(namespace: str, ttl_seconds: int = 86400):
    """Cache an async client method's JSON-able return value.

    The first positional argument (``self``) is left out of the key.
    Exceptions propagate uncached, and a ``None`` result is not stored, so a
    provider miss is retried on the next call.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = make_key(namespace, args[1:], kwargs)
            hit = await _read(key)
            if hit is not None:
                return hit

            result = await func(*args, **kwargs)
            if result is not None:
                await _write(key, result, ttl_seconds)
            return result
        return wrapper
    return decorator
