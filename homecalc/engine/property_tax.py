"""Deterministic property tax formula and the AI/formula recommendation.

Pure functions: no I/O. The formula is the local fallback when the AI
estimator is unavailable.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Callable

from homecalc.data.state_tax import StateTaxConfig, get_state_config
from homecalc.models.property_tax import (
    FALLBACK_SOURCE,
    Exemption,
    LocationQuery,
    PropertyTaxResult,
    TaxDetails,
    TaxExemptions,
    TaxRecommendation,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
DEFAULT_HOME_VALUE = Decimal("500000")
FALLBACK_CONFIDENCE = 0.3
HIGH_CONFIDENCE_THRESHOLD = 0.7


@dataclass(frozen=True)
class StateFormulaResult:
    annual_tax: Decimal
    effective_rate_pct: Decimal
    exemption_total: Decimal
    taxable_value: Decimal  # after dollar exemptions and any percentage discount
    exemptions: TaxExemptions


def _generic_tax(taxable_value: Decimal, config: StateTaxConfig, is_primary_residence: bool) -> Decimal:
    return taxable_value * config.average_rate / 100


# Named per-state hooks. Texas, Utah and California currently share the
# generic formula; a state that diverges replaces its entry here.
StateFormula = Callable[[Decimal, StateTaxConfig, bool], Decimal]
STATE_FORMULA_HOOKS: MappingProxyType[str, StateFormula] = MappingProxyType({
    "TX": _generic_tax,  # combined school/county/city average
    "UT": _generic_tax,
    "CA": _generic_tax,  # Proposition 13 needs assessment history
})


def state_formula_tax(
    state: str,
    home_value: Decimal,
    is_primary_residence: bool = True,
    is_over_65: bool = False,
    is_veteran: bool = False,
) -> StateFormulaResult:
    """Apply a state's exemptions and average rate to a home value.

    Dollar exemptions (homestead, veteran, fixed senior) are subtracted
    first; a percentage senior discount then scales what remains.
    """
    config = get_state_config(state)
    exemption_total = Decimal("0")
    homestead = senior = veteran = None

    if is_primary_residence and config.homestead_exemption:
        exemption_total += config.homestead_exemption
        homestead = Exemption(
            amount=float(config.homestead_exemption),
            description="Homestead exemption for primary residence",
        )

    senior_pct = Decimal("0")
    if is_over_65 and config.senior_discount:
        if config.senior_is_fixed_amount:
            exemption_total += config.senior_discount
            senior = Exemption(
                amount=float(config.senior_discount),
                description="Senior citizen exemption (65+)",
            )
        else:
            senior_pct = config.senior_discount
            senior = Exemption(
                discount=float(config.senior_discount),
                description=f"Senior citizen discount ({config.senior_discount}% off)",
            )

    if is_veteran and config.veteran_exemption:
        exemption_total += config.veteran_exemption
        veteran = Exemption(amount=float(config.veteran_exemption), description="Veteran exemption")

    taxable_value = max(Decimal("0"), home_value - exemption_total)
    if senior_pct:
        taxable_value = taxable_value * (1 - senior_pct / 100)

    formula = STATE_FORMULA_HOOKS.get(state.upper(), _generic_tax)
    annual_tax = formula(taxable_value, config, is_primary_residence)
    effective_rate = annual_tax / home_value * 100 if home_value > 0 else Decimal("0")

    return StateFormulaResult(
        annual_tax=annual_tax.quantize(TWO_PLACES, ROUND_HALF_UP),
        effective_rate_pct=effective_rate.quantize(Decimal("0.0001"), ROUND_HALF_UP),
        exemption_total=exemption_total,
        taxable_value=taxable_value.quantize(TWO_PLACES, ROUND_HALF_UP),
        exemptions=TaxExemptions(homestead=homestead, senior=senior, veteran=veteran),
    )


def fallback_result(query: LocationQuery) -> PropertyTaxResult:
    """Low-confidence PropertyTaxResult from the state formula."""
    home_value = Decimal(str(query.home_value)) if query.home_value else DEFAULT_HOME_VALUE
    formula = state_formula_tax(
        query.state,
        home_value,
        is_primary_residence=query.is_primary_residence,
        is_over_65=bool(query.is_over_65),
        is_veteran=bool(query.is_veteran),
    )
    config = get_state_config(query.state)

    return PropertyTaxResult(
        headline_rate=float(config.average_rate / 100),
        applicable_rate=float(formula.effective_rate_pct / 100),
        exemptions=formula.exemptions,
        estimated_annual_tax=float(formula.annual_tax),
        details=TaxDetails(
            assessed_value=float(home_value),
            exemption_total=float(formula.exemption_total),
            taxable_value=float(formula.taxable_value),
            jurisdiction=query.jurisdiction,
        ),
        confidence=FALLBACK_CONFIDENCE,
        sources=[FALLBACK_SOURCE],
    )


def blend_estimates(
    ai_annual_tax: float,
    formula_annual_tax: float,
    confidence: float,
    home_value: float,
) -> TaxRecommendation:
    """Use the AI figure above 0.7 confidence, otherwise average the two."""
    if confidence > HIGH_CONFIDENCE_THRESHOLD:
        annual, label, source = ai_annual_tax, "high", "AI Analysis"
    else:
        annual = (ai_annual_tax + formula_annual_tax) / 2
        label, source = "medium", "AI + State Formula Average"

    return TaxRecommendation(
        estimated_annual_tax=round(annual, 2),
        monthly_tax=round(annual / 12, 2),
        effective_rate=round(annual / home_value * 100, 4) if home_value > 0 else 0.0,
        confidence=label,
        source=source,
    )


def recommend_property_tax(
    query: LocationQuery,
    ai_result: PropertyTaxResult | None,
    ai_requested: bool = True,
) -> TaxRecommendation:
    """Pick the annual tax to plan around.

    ``ai_result`` is None (or a fallback result) when the estimator failed;
    the state formula is then used with low confidence.
    """
    home_value = Decimal(str(query.home_value)) if query.home_value else DEFAULT_HOME_VALUE
    formula = state_formula_tax(
        query.state,
        home_value,
        is_primary_residence=query.is_primary_residence,
        is_over_65=bool(query.is_over_65),
        is_veteran=bool(query.is_veteran),
    )

    if ai_result is not None and not ai_result.is_fallback:
        return blend_estimates(
            ai_result.estimated_annual_tax,
            float(formula.annual_tax),
            ai_result.confidence,
            float(home_value),
        )

    if ai_requested:
        logger.info("AI estimate unavailable for %s, using state formula", query.jurisdiction)
        label, source = "low", "State Formula (AI Unavailable)"
    else:
        label, source = "medium", "State Formula"

    annual = float(formula.annual_tax)
    return TaxRecommendation(
        estimated_annual_tax=annual,
        monthly_tax=round(annual / 12, 2),
        effective_rate=float(formula.effective_rate_pct),
        confidence=label,
        source=source,
    )
