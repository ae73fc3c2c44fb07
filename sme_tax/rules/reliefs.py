"""Personal tax reliefs.

A relief profile maps relief names to amounts. The well-known keys are
basic, epf_and_life_insurance, medical, spouse, children and education;
any other key is summed the same way.
"""

from decimal import Decimal

from sme_tax.rules.tax_years import get_current_tax_year
from sme_tax.utils.rounding import Number, to_decimal

PersonalReliefs = dict[str, Number | None]

RELIEF_LIMITS = get_current_tax_year().personal.relief_limits

# Reliefs most individuals can claim; spouse/children depend on the household
DEFAULT_RELIEFS: PersonalReliefs = {
    "basic": RELIEF_LIMITS.basic,
    "epf_and_life_insurance": RELIEF_LIMITS.epf_and_life_insurance,
    "medical": RELIEF_LIMITS.medical,
}


def get_default_reliefs() -> PersonalReliefs:
    """Fresh copy of the default profile, safe for callers to modify."""
    return dict(DEFAULT_RELIEFS)


def calculate_total_reliefs(reliefs: PersonalReliefs) -> Decimal:
    """Sum every numeric relief; None entries are skipped."""
    return sum(
        (to_decimal(value) for value in reliefs.values() if value is not None),
        Decimal("0"),
    )
