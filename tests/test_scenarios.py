"""Tests for the Enterprise and Sdn Bhd scenario calculators."""

from decimal import Decimal

import pytest

from sme_tax.rules.audit import AuditExemptionCriteria
from sme_tax.rules.zakat import ZakatCalculationInput, ZakatDeductions
from sme_tax.scenarios.income_tax import calculate_corporate_tax, calculate_personal_tax
from sme_tax.scenarios.models import TaxCalculationInputs
from sme_tax.scenarios.sdn_bhd import calculate_sdn_bhd_scenario
from sme_tax.scenarios.sole_prop import calculate_sole_prop_scenario

# --- Income tax wrapper tests ---


class TestIncomeTax:
    def test_personal_with_reliefs(self, basic_relief_only: dict[str, Decimal | None]) -> None:
        result = calculate_personal_tax(Decimal("100000"), basic_relief_only)
        assert result.tax == Decimal("7690.00")
        assert result.taxable_income == Decimal("91000.00")
        assert result.effective_rate == Decimal("0.0769")

    def test_personal_default_reliefs(self) -> None:
        result = calculate_personal_tax(Decimal("100000"))
        assert result.total_reliefs == Decimal("24000")
        assert result.tax == Decimal("4840.00")

    def test_reliefs_above_income(self) -> None:
        result = calculate_personal_tax(Decimal("10000"))
        assert result.taxable_income == Decimal("0.00")
        assert result.tax == Decimal("0")

    def test_corporate(self) -> None:
        result = calculate_corporate_tax(Decimal("150000"))
        assert result.tax == Decimal("22500.00")
        assert result.effective_rate == Decimal("0.1500")

    def test_zero_income_has_zero_rate(self) -> None:
        assert calculate_personal_tax(Decimal("0")).effective_rate == Decimal("0")
        assert calculate_corporate_tax(Decimal("0")).effective_rate == Decimal("0")

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="Total income"):
            calculate_personal_tax(Decimal("-1"))
        with pytest.raises(ValueError, match="Taxable profit"):
            calculate_corporate_tax(Decimal("-1"))


# --- Enterprise tests ---


class TestSolePropScenario:
    def test_hand_verified_100k(self, basic_relief_only: dict[str, Decimal | None]) -> None:
        inputs = TaxCalculationInputs(business_profit=Decimal("100000"), reliefs=basic_relief_only)
        result = calculate_sole_prop_scenario(inputs)
        assert result.personal_tax == Decimal("7690.00")
        assert result.net_cash == Decimal("92310.00")
        assert result.breakdown.taxable_income == Decimal("91000.00")
        assert result.zakat is None

    def test_hand_verified_300k(self) -> None:
        inputs = TaxCalculationInputs(business_profit=Decimal("300000"))
        result = calculate_sole_prop_scenario(inputs)
        assert result.personal_tax == Decimal("53660.00")
        assert result.net_cash == Decimal("246340.00")

    def test_other_income_counted(self) -> None:
        inputs = TaxCalculationInputs(business_profit=Decimal("80000"), other_income=Decimal("20000"))
        result = calculate_sole_prop_scenario(inputs)
        assert result.breakdown.total_income == Decimal("100000.00")
        assert result.net_cash == Decimal("95160.00")

    def test_bracket_breakdown(self) -> None:
        result = calculate_sole_prop_scenario(TaxCalculationInputs(business_profit=Decimal("100000")))
        assert sum(item.tax_for_bracket for item in result.tax_bracket_breakdown) == result.personal_tax

    def test_zakat_rebate_keeps_net_cash(self, basic_relief_only: dict[str, Decimal | None]) -> None:
        """Zakat below tax payable is fully rebated, so net cash does not move."""
        inputs = TaxCalculationInputs(
            business_profit=Decimal("100000"),
            reliefs=basic_relief_only,
            zakat=ZakatCalculationInput(enabled=True),
        )
        result = calculate_sole_prop_scenario(inputs)
        assert result.zakat is not None
        assert result.zakat.zakat_amount == Decimal("2500.00")
        assert result.zakat.tax_rebate == Decimal("2500.00")
        assert result.tax_before_zakat_rebate == Decimal("7690.00")
        assert result.personal_tax == Decimal("5190.00")
        assert result.net_cash == Decimal("92310.00")

    def test_zakat_above_tax_costs_cash(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("40000"),
            zakat=ZakatCalculationInput(enabled=True, amount_paid=Decimal("1000")),
        )
        result = calculate_sole_prop_scenario(inputs)
        # RM16k chargeable: RM110 tax, RM890 zakat not rebated
        assert result.personal_tax == Decimal("0.00")
        assert result.zakat is not None
        assert result.zakat.excess_zakat == Decimal("890.00")
        assert result.net_cash == Decimal("39000.00")

    def test_net_income_method_nisab_uses_net_income(self) -> None:
        """RM40k less RM20k expenses is below the nisab: no zakat and no nisab."""
        inputs = TaxCalculationInputs(
            business_profit=Decimal("40000"),
            zakat=ZakatCalculationInput(
                enabled=True,
                method="net_income",
                deductions=ZakatDeductions(expenses=Decimal("20000")),
            ),
        )
        result = calculate_sole_prop_scenario(inputs)
        assert result.zakat is not None
        assert result.zakat.zakat_amount == Decimal("0")
        assert not result.zakat.meets_nisab

    def test_gross_income_method_nisab_uses_total_income(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("40000"),
            zakat=ZakatCalculationInput(enabled=True),
        )
        result = calculate_sole_prop_scenario(inputs)
        assert result.zakat is not None
        assert result.zakat.zakat_amount == Decimal("1000.00")
        assert result.zakat.meets_nisab

    def test_disabled_zakat_ignored(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("100000"),
            zakat=ZakatCalculationInput(enabled=False, amount_paid=Decimal("5000")),
        )
        assert calculate_sole_prop_scenario(inputs).zakat is None

    def test_negative_profit_raises(self) -> None:
        with pytest.raises(ValueError, match="Business profit"):
            calculate_sole_prop_scenario(TaxCalculationInputs(business_profit=Decimal("-1")))


# --- Sdn Bhd tests ---


class TestSdnBhdScenario:
    def test_hand_verified_200k(self, default_inputs: TaxCalculationInputs) -> None:
        """RM200k profit, RM5k/month salary, RM5k compliance costs."""
        result = calculate_sdn_bhd_scenario(default_inputs)
        assert result.employer_epf == Decimal("7800.00")
        assert result.employee_epf == Decimal("6600.00")
        assert result.employer_socso == Decimal("1050.00")
        assert result.employee_socso == Decimal("300.00")
        assert result.breakdown.company_taxable_profit == Decimal("131150.00")
        assert result.corporate_tax == Decimal("19672.50")
        assert result.breakdown.dividends == Decimal("111477.50")
        # RM60k salary less RM23.6k reliefs (EPF relief = employee EPF)
        assert result.personal_tax == Decimal("684.00")
        assert result.net_cash == Decimal("158893.50")
        assert result.epf_savings == Decimal("14400.00")

    def test_affordable_salary(self, default_inputs: TaxCalculationInputs) -> None:
        affordability = calculate_sdn_bhd_scenario(default_inputs).salary_affordability
        assert affordability.is_affordable
        assert affordability.shortfall == Decimal("0.00")
        assert affordability.max_affordable_salary == Decimal("178571.43")

    def test_unaffordable_salary(self) -> None:
        result = calculate_sdn_bhd_scenario(TaxCalculationInputs(business_profit=Decimal("50000")))
        affordability = result.salary_affordability
        assert not affordability.is_affordable
        assert affordability.company_would_be_insolvent
        assert affordability.shortfall == Decimal("18850.00")
        assert result.corporate_tax == Decimal("0.00")
        assert result.breakdown.dividends == Decimal("0.00")
        assert result.net_cash == Decimal("47416.00")

    def test_net_cash_can_go_negative(self) -> None:
        inputs = TaxCalculationInputs(business_profit=Decimal("0"), monthly_salary=Decimal("0"))
        assert calculate_sdn_bhd_scenario(inputs).net_cash == Decimal("-5000.00")

    def test_explicit_zero_overrides_defaults(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("100000"),
            monthly_salary=Decimal("0"),
            compliance_costs=Decimal("0"),
        )
        result = calculate_sdn_bhd_scenario(inputs)
        assert result.breakdown.annual_salary == Decimal("0.00")
        assert result.total_compliance_cost == Decimal("0.00")
        assert result.net_cash == Decimal("85000.00")

    def test_epf_relief_replaces_caller_value(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("200000"),
            reliefs={"basic": Decimal("9000"), "epf_and_life_insurance": Decimal("0")},
        )
        # RM60k - (9,000 + 6,600) = RM44,400 chargeable
        assert calculate_sdn_bhd_scenario(inputs).personal_tax == Decimal("1164.00")

    def test_partial_distribution(self, default_inputs: TaxCalculationInputs) -> None:
        inputs = default_inputs.model_copy(update={"dividend_distribution_percent": Decimal("50")})
        breakdown = calculate_sdn_bhd_scenario(inputs).breakdown
        assert breakdown.dividends == Decimal("55738.75")
        assert breakdown.retained_earnings == Decimal("55738.75")

    def test_dividend_surcharge(self) -> None:
        inputs = TaxCalculationInputs(business_profit=Decimal("300000"), apply_ya2025_dividend_surcharge=True)
        breakdown = calculate_sdn_bhd_scenario(inputs).breakdown
        assert breakdown.dividends == Decimal("194854.50")
        assert breakdown.dividend_tax == Decimal("1897.09")

    def test_surcharge_off_by_default(self) -> None:
        result = calculate_sdn_bhd_scenario(TaxCalculationInputs(business_profit=Decimal("300000")))
        assert result.breakdown.dividend_tax == Decimal("0.00")

    def test_audit_cost_when_not_exempt(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("200000"),
            audit_cost=Decimal("3000"),
            audit_criteria=AuditExemptionCriteria(Decimal("200000"), Decimal("50000"), 2),
        )
        assert calculate_sdn_bhd_scenario(inputs).total_compliance_cost == Decimal("8000.00")

    def test_no_audit_cost_when_exempt(self) -> None:
        inputs = TaxCalculationInputs(
            business_profit=Decimal("200000"),
            audit_cost=Decimal("3000"),
            audit_criteria=AuditExemptionCriteria(Decimal("90000"), Decimal("50000"), 2),
        )
        assert calculate_sdn_bhd_scenario(inputs).total_compliance_cost == Decimal("5000.00")

    def test_zakat_deduction(self, default_inputs: TaxCalculationInputs) -> None:
        inputs = default_inputs.model_copy(update={"zakat": ZakatCalculationInput(enabled=True)})
        result = calculate_sdn_bhd_scenario(inputs)
        assert result.zakat is not None
        assert result.zakat.zakat_amount == Decimal("3278.75")
        assert result.zakat.tax_deduction == Decimal("3278.75")
        assert result.corporate_tax_before_zakat == Decimal("19672.50")
        assert result.corporate_tax == Decimal("19180.69")
        assert result.zakat.net_tax_impact == Decimal("491.81")

    def test_bracket_breakdowns(self, default_inputs: TaxCalculationInputs) -> None:
        result = calculate_sdn_bhd_scenario(default_inputs)
        assert len(result.corporate_tax_bracket_breakdown) == 1
        assert result.corporate_tax_bracket_breakdown[0].income_in_bracket == Decimal("131150.00")
        assert sum(item.tax_for_bracket for item in result.personal_tax_bracket_breakdown) == Decimal("684.00")

    def test_negative_salary_raises(self) -> None:
        inputs = TaxCalculationInputs(business_profit=Decimal("100000"), monthly_salary=Decimal("-1"))
        with pytest.raises(ValueError, match="Monthly salary"):
            calculate_sdn_bhd_scenario(inputs)
