"""Audit exemption for private companies (Companies Act 2016, s267)."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, NamedTuple

from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.utils.rounding import to_decimal

AUDIT_EXEMPTION_THRESHOLDS = get_current_tax_year().audit


class AuditExemptionCriteria(NamedTuple):
    revenue: Decimal
    total_assets: Decimal
    employees: int


def is_audit_exempt(
    criteria: AuditExemptionCriteria | Mapping[str, Any],
    tax_year: TaxYearConfig | None = None,
) -> bool:
    """True only when revenue, total assets AND headcount are all within limits.

    ``criteria`` may also be a mapping with revenue, total_assets and
    employees keys.
    """
    if isinstance(criteria, Mapping):
        criteria = AuditExemptionCriteria(**criteria)

    limits = (tax_year or get_current_tax_year()).audit
    return (
        to_decimal(criteria.revenue) <= limits.max_revenue
        and to_decimal(criteria.total_assets) <= limits.max_total_assets
        and criteria.employees <= limits.max_employees
    )
