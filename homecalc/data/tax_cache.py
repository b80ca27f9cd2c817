"""SQLite-backed cache of property tax estimates.

Rows are keyed by a fingerprint of the query and carry their own expiry.
Lookups never return expired rows, so the periodic sweep only reclaims space.
When the row count exceeds the cap on insert, the rows expiring soonest are
evicted first.
"""

import json
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

from homecalc.models.property_tax import LocationQuery, PropertyTaxRecord, PropertyTaxResult, TaxCacheStats

logger = logging.getLogger(__name__)

VALUE_BUCKET = 10_000
DEFAULT_MAX_ENTRIES = 1000

_COLUMNS = (
    "cache_key, state, zip_code, city, county, is_primary_residence, "
    "is_over_65, is_veteran, is_disabled, home_value, result_json, "
    "last_updated, expires_at"
)


def cache_key(query: LocationQuery) -> str:
    """Canonical fingerprint of a query.

    The location uses ZIP, then city, then county. Home value is floored to
    a $10,000 bucket and a missing value counts as 0.
    """
    place = query.zip_code or query.city or query.county or ""
    bucket = int((query.home_value or 0) // VALUE_BUCKET) * VALUE_BUCKET
    return json.dumps(
        {
            "location": f"{query.state.upper()}-{place}",
            "primary": bool(query.is_primary_residence),
            "senior": bool(query.is_over_65),
            "veteran": bool(query.is_veteran),
            "disabled": bool(query.is_disabled),
            "value": bucket,
        },
        sort_keys=True,
    )


class PropertyTaxCache:
    def __init__(self, db_path: str = "data/property_tax_cache.db", max_entries: int = DEFAULT_MAX_ENTRIES):
        self.db_path = db_path
        self.max_entries = max_entries
        # An in-memory database lives only as long as its connection, so keep one
        self._memory_conn = None
        if db_path == ":memory:":
            self._memory_conn = sqlite3.connect(db_path, check_same_thread=False)
            self._memory_conn.row_factory = sqlite3.Row
        else:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        if self._memory_conn is not None:
            return self._memory_conn
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS property_tax_cache (
                    cache_key TEXT PRIMARY KEY,
                    state TEXT NOT NULL,
                    zip_code TEXT,
                    city TEXT,
                    county TEXT,
                    is_primary_residence BOOLEAN,
                    is_over_65 BOOLEAN,
                    is_veteran BOOLEAN,
                    is_disabled BOOLEAN,
                    home_value REAL,
                    result_json TEXT NOT NULL,
                    last_updated TIMESTAMP,
                    expires_at TIMESTAMP
                );

                CREATE INDEX IF NOT EXISTS idx_property_tax_expires
                    ON property_tax_cache (expires_at);
            """)

    @staticmethod
    def _to_record(row: sqlite3.Row) -> PropertyTaxRecord:
        result = json.loads(row["result_json"])
        return PropertyTaxRecord(
            **result,
            cache_key=row["cache_key"],
            state=row["state"],
            zip_code=row["zip_code"],
            city=row["city"],
            county=row["county"],
            is_primary_residence=bool(row["is_primary_residence"]),
            is_over_65=None if row["is_over_65"] is None else bool(row["is_over_65"]),
            is_veteran=None if row["is_veteran"] is None else bool(row["is_veteran"]),
            is_disabled=None if row["is_disabled"] is None else bool(row["is_disabled"]),
            home_value=row["home_value"],
            last_updated=datetime.fromisoformat(row["last_updated"]),
            expires_at=datetime.fromisoformat(row["expires_at"]),
        )

    def lookup(self, key: str) -> PropertyTaxRecord | None:
        """Return the unexpired record for ``key``, or None."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM property_tax_cache "
                "WHERE cache_key = ? AND expires_at > ?",
                (key, now),
            ).fetchone()
        if row:
            return self._to_record(row)
        return None

    def upsert(self, query: LocationQuery, result: PropertyTaxResult, ttl: timedelta) -> PropertyTaxRecord:
        """Store a result under the query's key.

        An existing row is overwritten in place. A new row triggers capacity
        enforcement.
        """
        key = cache_key(query)
        now = datetime.now(timezone.utc)
        expires = now + ttl
        with self._connect() as conn:
            exists = conn.execute(
                "SELECT 1 FROM property_tax_cache WHERE cache_key = ?", (key,)
            ).fetchone() is not None
            conn.execute(
                f"INSERT OR REPLACE INTO property_tax_cache ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    key,
                    query.state.upper(),
                    query.zip_code,
                    query.city,
                    query.county,
                    query.is_primary_residence,
                    query.is_over_65,
                    query.is_veteran,
                    query.is_disabled,
                    query.home_value,
                    result.model_dump_json(),
                    now.isoformat(),
                    expires.isoformat(),
                ),
            )

        if not exists:
            self.evict_oldest(self.max_entries)

        return PropertyTaxRecord(
            **result.model_dump(),
            cache_key=key,
            **query.model_dump(),
            last_updated=now,
            expires_at=expires,
        )

    def evict_oldest(self, max_entries: int) -> int:
        """Delete the rows expiring soonest until at most ``max_entries`` remain."""
        with self._connect() as conn:
            count = conn.execute("SELECT COUNT(*) AS cnt FROM property_tax_cache").fetchone()["cnt"]
            excess = count - max_entries
            if excess <= 0:
                return 0
            conn.execute(
                "DELETE FROM property_tax_cache WHERE cache_key IN ("
                "SELECT cache_key FROM property_tax_cache ORDER BY expires_at ASC LIMIT ?)",
                (excess,),
            )
        logger.info("Evicted %d property tax cache entries (cap %d)", excess, max_entries)
        return excess

    def sweep_expired(self) -> int:
        """Delete every row whose expiry has passed."""
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            deleted = conn.execute(
                "DELETE FROM property_tax_cache WHERE expires_at <= ?", (now,)
            ).rowcount
        logger.info("Swept %d expired property tax cache entries", deleted)
        return deleted

    def clear(self) -> int:
        with self._connect() as conn:
            deleted = conn.execute("DELETE FROM property_tax_cache").rowcount
        logger.info("Cleared %d property tax cache entries", deleted)
        return deleted

    def stats(self) -> TaxCacheStats:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            total = conn.execute("SELECT COUNT(*) AS cnt FROM property_tax_cache").fetchone()["cnt"]
            expired = conn.execute(
                "SELECT COUNT(*) AS cnt FROM property_tax_cache WHERE expires_at <= ?", (now,)
            ).fetchone()["cnt"]
            rows = conn.execute(
                "SELECT state, COUNT(*) AS cnt FROM property_tax_cache GROUP BY state"
            ).fetchall()

        return TaxCacheStats(
            total=total,
            active=total - expired,
            expired=expired,
            by_state={row["state"]: row["cnt"] for row in rows},
        )
