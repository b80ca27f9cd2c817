"""AI property tax estimator.

Runs three focused prompts in parallel (headline rate, homestead exemption,
special exemptions) and combines the answers into a PropertyTaxResult.
Any failure raises ExternalUnavailable; the caller owns the fallback.
"""

import asyncio
import json
import logging

import anthropic

from homecalc.config import settings
from homecalc.errors import ExternalUnavailable, LookupTimeout
from homecalc.models.property_tax import (
    Exemption,
    LocationQuery,
    PropertyTaxResult,
    TaxDetails,
    TaxExemptions,
)

logger = logging.getLogger(__name__)

DEFAULT_HOME_VALUE = 500_000.0
AI_CONFIDENCE = 0.9
AI_SOURCE = "AI Parallel Search"

# Used when the model finds no homestead exemption for a primary residence.
# Percent values are a share of market value.
STATE_HOMESTEAD_FALLBACKS = {
    "UT": {"percentage": 45.0},
    "TX": {"amount": 100000.0},
    "FL": {"amount": 50000.0},
    "AZ": {"amount": 4748.0},
    "GA": {"amount": 2000.0},
    "CA": {"amount": 7000.0},
}

SYSTEM_PROMPT = (
    "You are a property tax expert. Use official government sources such as county "
    "assessor websites and published tax documents. Return ONLY valid JSON, no other text."
)


def _parse_json(text: str) -> dict:
    text = text.strip()
    # Extract JSON from response (handle markdown code blocks)
    if "```" in text:
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    return json.loads(text)


def _money(value) -> float | None:
    """Parse a model-supplied amount like 12000, "12,000" or "$12,000"."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = str(value).replace("$", "").replace(",", "").replace("%", "").strip()
    if not cleaned or cleaned.lower() == "none":
        return None
    return float(cleaned)


class PropertyTaxEstimator:
    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_timeout_seconds
        self._client = client

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            if not self.api_key:
                raise ExternalUnavailable("Anthropic API key not configured")
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def _ask(self, prompt: str, max_tokens: int = 300) -> dict:
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return _parse_json(message.content[0].text)

    async def _headline_rate(self, jurisdiction: str) -> tuple[float, str]:
        data = await self._ask(
            f"What is the property tax rate for {jurisdiction}?\n"
            "If you find several rates, use the county or city base rate.\n\n"
            'Return JSON: {"rate": <decimal fraction, e.g. 0.006016 for 0.6016%>, "source": <str>}'
        )
        rate = float(data["rate"])
        if not 0 < rate < 1:
            raise ValueError(f"implausible tax rate {rate}")
        return rate, data.get("source") or "AI search"

    async def _homestead(self, jurisdiction: str, state: str, home_value: float) -> Exemption | None:
        data = await self._ask(
            f"What is the homestead or residential exemption for a primary residence in {jurisdiction}?\n"
            f"Home value: ${home_value:,.0f}\nState: {state}\n\n"
            'Return JSON: {"exemption": <number or null>, "type": "dollar" | "percentage", '
            '"description": <str>}'
        )
        value = _money(data.get("exemption"))
        if value:
            if str(data.get("type", "")).lower() == "percentage":
                return Exemption(
                    amount=round(home_value * value / 100),
                    description=data.get("description") or f"{value:g}% residential exemption",
                )
            return Exemption(amount=round(value), description=data.get("description") or "Homestead exemption")

        fallback = STATE_HOMESTEAD_FALLBACKS.get(state)
        if fallback is None:
            return None
        if "percentage" in fallback:
            pct = fallback["percentage"]
            return Exemption(amount=round(home_value * pct / 100), description=f"{pct:g}% residential exemption")
        return Exemption(amount=fallback["amount"], description="Homestead exemption")

    async def _special_exemptions(self, jurisdiction: str, query: LocationQuery) -> dict[str, float]:
        wanted = []
        if query.is_over_65:
            wanted.append("senior citizen (65+)")
        if query.is_veteran:
            wanted.append("veteran")
        if query.is_disabled:
            wanted.append("disability")
        if not wanted:
            return {}

        data = await self._ask(
            f"What are the property tax exemption amounts in {jurisdiction} for: {', '.join(wanted)}?\n\n"
            'Return JSON: {"senior": <dollars or null>, "veteran": <dollars or null>, '
            '"disability": <dollars or null>}'
        )
        found = {}
        for name, flag in (("senior", query.is_over_65), ("veteran", query.is_veteran), ("disability", query.is_disabled)):
            amount = _money(data.get(name)) if flag else None
            if amount:
                found[name] = amount
        return found

    async def _gather(self, query: LocationQuery, home_value: float):
        jurisdiction = query.jurisdiction
        homestead = (
            self._homestead(jurisdiction, query.state, home_value)
            if query.is_primary_residence
            else asyncio.sleep(0, result=None)
        )
        return await asyncio.gather(
            self._headline_rate(jurisdiction),
            homestead,
            self._special_exemptions(jurisdiction, query),
        )

    async def estimate(self, query: LocationQuery) -> PropertyTaxResult:
        """Estimate rates and exemptions for a location.

        Raises:
            LookupTimeout: the prompts did not finish within the timeout.
            ExternalUnavailable: missing key, API error or unparseable answer.
        """
        home_value = query.home_value or DEFAULT_HOME_VALUE
        try:
            (rate, source), homestead, special = await asyncio.wait_for(
                self._gather(query, home_value), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise LookupTimeout(f"AI tax estimate timed out after {self.timeout}s") from e
        except ExternalUnavailable:
            raise
        except Exception as e:
            logger.warning("AI tax estimate failed for %s: %s", query.jurisdiction, e)
            raise ExternalUnavailable(f"AI tax estimate failed: {e}") from e

        exemptions = TaxExemptions(
            homestead=homestead,
            senior=Exemption(amount=special["senior"], description="Senior citizen exemption (65+)")
            if "senior" in special else None,
            veteran=Exemption(amount=special["veteran"], description="Veteran property tax exemption")
            if "veteran" in special else None,
            disability=Exemption(amount=special["disability"], description="Disability exemption")
            if "disability" in special else None,
        )
        exemption_total = sum(
            e.amount or 0
            for e in (exemptions.homestead, exemptions.senior, exemptions.veteran, exemptions.disability)
            if e is not None
        )
        taxable_value = max(0.0, home_value - exemption_total)
        annual_tax = taxable_value * rate

        return PropertyTaxResult(
            headline_rate=rate,
            applicable_rate=annual_tax / home_value if home_value else rate,
            exemptions=exemptions,
            estimated_annual_tax=round(annual_tax, 2),
            details=TaxDetails(
                assessed_value=home_value,
                exemption_total=exemption_total,
                taxable_value=taxable_value,
                jurisdiction=query.jurisdiction,
            ),
            confidence=AI_CONFIDENCE,
            sources=[AI_SOURCE, source],
        )
