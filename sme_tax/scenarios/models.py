"""Pydantic models for scenario inputs and results."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from sme_tax.rules.audit import AuditExemptionCriteria
from sme_tax.rules.zakat import ZakatCalculationInput, ZakatCalculationResult

InputMode = Literal["profit", "target"]
Verdict = Literal["sole_prop", "sdn_bhd", "similar"]


# --- Inputs ---


class TaxCalculationInputs(BaseModel):
    """Everything the comparison needs about one business and its owner.

    Unset Sdn Bhd settings fall back to config/comparison.yaml defaults.
    """

    business_profit: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    monthly_salary: Decimal | None = None
    compliance_costs: Decimal | None = None  # annual
    audit_cost: Decimal | None = None  # annual, only charged when not exempt
    audit_criteria: AuditExemptionCriteria | None = None
    reliefs: dict[str, Decimal | None] | None = None
    apply_ya2025_dividend_surcharge: bool = False
    dividend_distribution_percent: Decimal | None = None  # 0-100, default 100
    has_foreign_ownership: bool = False  # >= 20% foreign, loses SME rates
    input_mode: InputMode = "profit"
    target_net_income: Decimal | None = None  # monthly take-home in target mode
    zakat: ZakatCalculationInput | None = None


class FieldError(BaseModel):
    """A single input validation problem."""

    field: str
    message: str


# --- Results ---


class TaxBracketBreakdown(BaseModel):
    """One tier of a progressive calculation, for display."""

    bracket_min: Decimal
    bracket_max: Decimal | None = None
    rate: Decimal
    income_in_bracket: Decimal
    tax_for_bracket: Decimal


class SolePropBreakdown(BaseModel):
    business_profit: Decimal
    other_income: Decimal
    total_income: Decimal
    total_reliefs: Decimal
    taxable_income: Decimal


class SolePropScenarioResult(BaseModel):
    personal_tax: Decimal
    net_cash: Decimal
    effective_tax_rate: Decimal
    breakdown: SolePropBreakdown
    tax_bracket_breakdown: list[TaxBracketBreakdown] = []
    zakat: ZakatCalculationResult | None = None
    tax_before_zakat_rebate: Decimal | None = None


class SalaryAffordability(BaseModel):
    max_affordable_salary: Decimal  # annual
    is_affordable: bool
    shortfall: Decimal  # 0 when affordable
    company_would_be_insolvent: bool


class SdnBhdBreakdown(BaseModel):
    annual_salary: Decimal
    company_taxable_profit: Decimal
    post_tax_profit: Decimal
    dividends: Decimal
    dividend_tax: Decimal
    retained_earnings: Decimal
    salary_after_epf: Decimal
    salary_after_tax: Decimal
    other_income: Decimal
    business_profit: Decimal


class SdnBhdScenarioResult(BaseModel):
    corporate_tax: Decimal
    personal_tax: Decimal
    employer_epf: Decimal
    employee_epf: Decimal
    employer_socso: Decimal  # annual
    employee_socso: Decimal  # annual
    total_compliance_cost: Decimal
    net_cash: Decimal  # negative when the structure loses money
    salary_affordability: SalaryAffordability
    breakdown: SdnBhdBreakdown
    epf_savings: Decimal
    corporate_tax_bracket_breakdown: list[TaxBracketBreakdown] = []
    personal_tax_bracket_breakdown: list[TaxBracketBreakdown] = []
    zakat: ZakatCalculationResult | None = None
    corporate_tax_before_zakat: Decimal | None = None


class ComparisonResult(BaseModel):
    which_is_better: Verdict
    difference: Decimal  # positive = Sdn Bhd better
    savings_if_switch: Decimal
    crossover_point_profit: Decimal | None = None
    recommendation: str
    sole_prop_result: SolePropScenarioResult
    sdn_bhd_result: SdnBhdScenarioResult
    has_affordability_issue: bool
    has_sme_qualification_issue: bool
    warnings: list[str] = Field(default_factory=list)
