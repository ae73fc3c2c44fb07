"""Input checks for the scenario calculators."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sme_tax.rules.audit import AuditExemptionCriteria
from sme_tax.scenarios.models import FieldError, TaxCalculationInputs
from sme_tax.utils.rounding import Number, is_non_negative, to_decimal


def require_non_negative(field: str, value: Number) -> Decimal:
    """Return ``value`` as Decimal, or raise ValueError if negative or not finite."""
    if not is_non_negative(value):
        raise ValueError(f"{field} must be a valid non-negative number, got {value!r}")
    return to_decimal(value)


def validate_inputs(inputs: TaxCalculationInputs) -> list[FieldError]:
    """Collect every field problem instead of failing on the first.

    Salary above business profit is allowed: it models a loss-making company.
    """
    errors: list[FieldError] = []

    def check(field: str, value: Decimal | int | None, label: str) -> None:
        if value is not None and value < 0:
            errors.append(FieldError(field=field, message=f"{label} cannot be negative"))

    check("business_profit", inputs.business_profit, "Business profit")
    check("other_income", inputs.other_income, "Other income")
    check("monthly_salary", inputs.monthly_salary, "Monthly salary")
    check("compliance_costs", inputs.compliance_costs, "Compliance costs")
    check("audit_cost", inputs.audit_cost, "Audit cost")
    check("target_net_income", inputs.target_net_income, "Target net income")

    if inputs.audit_criteria is not None:
        check("audit_criteria.revenue", inputs.audit_criteria.revenue, "Revenue")
        check("audit_criteria.total_assets", inputs.audit_criteria.total_assets, "Total assets")
        check("audit_criteria.employees", inputs.audit_criteria.employees, "Number of employees")

    percent = inputs.dividend_distribution_percent
    if percent is not None and not 0 <= percent <= 100:
        errors.append(
            FieldError(
                field="dividend_distribution_percent",
                message="Dividend distribution percentage must be between 0 and 100",
            )
        )

    if inputs.reliefs:
        for name, amount in inputs.reliefs.items():
            check(f"reliefs.{name}", amount, f"Relief '{name}'")

    return errors


def _floor(value: Any) -> Decimal | None:
    if value is None:
        return None
    return max(Decimal("0"), to_decimal(value))


def sanitize_inputs(raw: dict[str, Any]) -> TaxCalculationInputs:
    """Build inputs from loosely-typed data, flooring negatives at zero.

    Employee counts are rounded to whole people and the distribution
    percentage is clamped to 0-100.
    """
    data = dict(raw)
    data["business_profit"] = _floor(data.get("business_profit")) or Decimal("0")
    data["other_income"] = _floor(data.get("other_income")) or Decimal("0")
    for field in ("monthly_salary", "compliance_costs", "audit_cost", "target_net_income"):
        data[field] = _floor(data.get(field))

    criteria = data.get("audit_criteria")
    if criteria is not None:
        if not isinstance(criteria, dict):
            criteria = criteria._asdict()
        data["audit_criteria"] = AuditExemptionCriteria(
            revenue=_floor(criteria.get("revenue")) or Decimal("0"),
            total_assets=_floor(criteria.get("total_assets")) or Decimal("0"),
            employees=int((_floor(criteria.get("employees")) or Decimal("0")).to_integral_value(ROUND_HALF_UP)),
        )

    percent = data.get("dividend_distribution_percent")
    if percent is not None:
        data["dividend_distribution_percent"] = min(Decimal("100"), max(Decimal("0"), to_decimal(percent)))

    return TaxCalculationInputs.model_validate(data)
