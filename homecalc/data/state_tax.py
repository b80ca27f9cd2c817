"""State property tax configuration used by the deterministic tax formula.

Average rates are effective percentages of market value. Exemption amounts are
dollars off assessed value, except ``senior_discount``: values above 100 are a
fixed-dollar exemption, values at or below 100 are a percentage discount.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType


@dataclass(frozen=True)
class StateTaxConfig:
    state: str
    average_rate: Decimal  # percent
    homestead_exemption: Decimal = Decimal("0")
    senior_discount: Decimal = Decimal("0")
    veteran_exemption: Decimal = Decimal("0")
    has_special_formula: bool = False
    notes: str = ""

    @property
    def senior_is_fixed_amount(self) -> bool:
        return self.senior_discount > 100


STATE_TAX_CONFIGS: MappingProxyType[str, StateTaxConfig] = MappingProxyType({
    "TX": StateTaxConfig(
        state="Texas",
        average_rate=Decimal("1.80"),
        homestead_exemption=Decimal("100000"),  # school tax exemption
        senior_discount=Decimal("10"),  # additional 10% for 65+
        veteran_exemption=Decimal("12000"),
        has_special_formula=True,
        notes="School district variations and multiple exemption types",
    ),
    "NJ": StateTaxConfig(
        state="New Jersey",
        average_rate=Decimal("2.13"),
        veteran_exemption=Decimal("250"),
    ),
    "NH": StateTaxConfig(
        state="New Hampshire",
        average_rate=Decimal("1.86"),
        veteran_exemption=Decimal("500"),
    ),
    "NY": StateTaxConfig(
        state="New York",
        average_rate=Decimal("1.68"),
        senior_discount=Decimal("50"),  # Senior Citizens Exemption
        veteran_exemption=Decimal("15000"),
        has_special_formula=True,
        notes="STAR exemption for primary residences, county variations",
    ),
    "CT": StateTaxConfig(
        state="Connecticut",
        average_rate=Decimal("1.63"),
        veteran_exemption=Decimal("1000"),
    ),
    "IL": StateTaxConfig(
        state="Illinois",
        average_rate=Decimal("2.05"),
        homestead_exemption=Decimal("10000"),
        senior_discount=Decimal("5000"),
        veteran_exemption=Decimal("5000"),
    ),
    "CA": StateTaxConfig(
        state="California",
        average_rate=Decimal("0.75"),
        homestead_exemption=Decimal("7000"),
        veteran_exemption=Decimal("4000"),
        has_special_formula=True,
        notes="Proposition 13 assessment limits",
    ),
    "FL": StateTaxConfig(
        state="Florida",
        average_rate=Decimal("0.83"),
        homestead_exemption=Decimal("50000"),
        senior_discount=Decimal("50000"),  # additional exemption for 65+
        veteran_exemption=Decimal("5000"),
    ),
    "UT": StateTaxConfig(
        state="Utah",
        average_rate=Decimal("0.60"),
        homestead_exemption=Decimal("45000"),
        has_special_formula=True,
        notes="Primary residence calculation methods",
    ),
})

DEFAULT_TAX_CONFIG = StateTaxConfig(state="Default", average_rate=Decimal("1.07"))  # national average


def get_state_config(state: str) -> StateTaxConfig:
    """Return the tax configuration for a state, or the national default."""
    return STATE_TAX_CONFIGS.get(state.upper(), DEFAULT_TAX_CONFIG)
