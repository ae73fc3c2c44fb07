"""Enterprise vs Sdn Bhd comparison, crossover search and the end-to-end entry point."""

import logging
from decimal import Decimal

from config import load_yaml_config
from config.settings import settings
from sme_tax.rules.personal_tax import calculate_required_income_for_net_cash
from sme_tax.rules.reliefs import calculate_total_reliefs, get_default_reliefs
from sme_tax.rules.tax_years import TaxYearConfig, get_current_tax_year
from sme_tax.scenarios.models import (
    ComparisonResult,
    SdnBhdScenarioResult,
    SolePropScenarioResult,
    TaxCalculationInputs,
    Verdict,
)
from sme_tax.scenarios.sdn_bhd import calculate_sdn_bhd_scenario
from sme_tax.scenarios.sole_prop import calculate_sole_prop_scenario
from sme_tax.utils.memoization import MemoCache, memoize
from sme_tax.utils.rounding import Number, round_currency, round_to_ringgit, to_decimal

logger = logging.getLogger(__name__)

# Crossover results keyed by every input except business profit
_crossover_cache: MemoCache[str, Decimal | None] = MemoCache(settings.crossover_cache_size)


def _rm(amount: Decimal) -> str:
    return f"RM{amount:,.2f}"


def _net_cash_difference(inputs: TaxCalculationInputs, profit: Decimal, tax_year: TaxYearConfig) -> Decimal:
    """Sdn Bhd net cash minus Enterprise net cash at ``profit``."""
    at_profit = inputs.model_copy(update={"business_profit": profit})
    sdn_bhd = calculate_sdn_bhd_scenario(at_profit, tax_year)
    sole_prop = calculate_sole_prop_scenario(at_profit, tax_year)
    return sdn_bhd.net_cash - sole_prop.net_cash


def _crossover_key(inputs: TaxCalculationInputs, tax_year: TaxYearConfig) -> str:
    varying = {"business_profit", "input_mode", "target_net_income", "has_foreign_ownership"}
    return f"{tax_year.year_assessment}:{inputs.model_dump_json(exclude=varying)}"


def calculate_crossover_point(
    inputs: TaxCalculationInputs,
    current_profit: Number,
    tax_year: TaxYearConfig | None = None,
) -> Decimal | None:
    """Business profit at which both structures leave the owner the same cash.

    Bisection over the profit range in config/comparison.yaml. Returns the
    current profit when the two are already within the early-exit threshold,
    and None when the difference keeps one sign across the whole range or
    the search runs out of iterations.
    """
    config = tax_year or get_current_tax_year()
    search = load_yaml_config("comparison.yaml")["crossover"]
    tolerance = to_decimal(search["tolerance"])
    max_iterations = search["max_iterations"]

    cache_key = _crossover_key(inputs, config)
    if _crossover_cache.has(cache_key):
        logger.debug("Crossover cache hit")
        return _crossover_cache.get(cache_key)

    profit = to_decimal(current_profit)
    if abs(_net_cash_difference(inputs, profit, config)) < to_decimal(search["early_exit_threshold"]):
        return round_to_ringgit(profit)

    low = to_decimal(search["min_profit"])
    high = to_decimal(search["max_profit"])
    low_diff = _net_cash_difference(inputs, low, config)
    high_diff = _net_cash_difference(inputs, high, config)

    result: Decimal | None = None
    if (low_diff > 0 and high_diff > 0) or (low_diff < 0 and high_diff < 0):
        logger.debug("No crossover between %s and %s", low, high)
    else:
        iterations = 0
        while iterations < max_iterations and high - low > tolerance:
            mid = (low + high) / 2
            mid_diff = _net_cash_difference(inputs, mid, config)
            if abs(mid_diff) < tolerance:
                result = round_to_ringgit(mid)
                break

            if (low_diff > 0 and mid_diff > 0) or (low_diff < 0 and mid_diff < 0):
                low = mid
            else:
                high = mid
            iterations += 1
        else:
            if iterations < max_iterations:
                result = round_to_ringgit((low + high) / 2)
        logger.debug("Crossover search took %d iterations", iterations)

    _crossover_cache.set(cache_key, result)
    return result


def clear_crossover_cache() -> None:
    _crossover_cache.clear()


def compare_scenarios(
    sole_prop_result: SolePropScenarioResult,
    sdn_bhd_result: SdnBhdScenarioResult,
    business_profit: Number,
    inputs: TaxCalculationInputs,
    tax_year: TaxYearConfig | None = None,
) -> ComparisonResult:
    """Pick the better structure and explain why.

    Args:
        sole_prop_result: Enterprise scenario at ``business_profit``.
        sdn_bhd_result: Sdn Bhd scenario at ``business_profit``.
        business_profit: Profit both scenarios were computed for.
        inputs: The inputs behind both results; used for warnings and the
            crossover search.
        tax_year: Schedule to use; defaults to the current YA.

    Returns:
        ComparisonResult with the verdict, recommendation text and warnings.
    """
    config = tax_year or get_current_tax_year()
    similarity_threshold = to_decimal(load_yaml_config("comparison.yaml")["comparison"]["similarity_threshold"])

    difference = sdn_bhd_result.net_cash - sole_prop_result.net_cash
    savings = abs(difference)
    affordability = sdn_bhd_result.salary_affordability
    max_monthly = round_to_ringgit(affordability.max_affordable_salary / 12)
    warnings: list[str] = []

    has_affordability_issue = affordability.company_would_be_insolvent
    if has_affordability_issue:
        warnings.append(
            "Your proposed salary exceeds what the company can afford. "
            f"The company would need an additional {_rm(affordability.shortfall)} to pay this salary. "
            f"Maximum affordable salary: RM{max_monthly:,}/month."
        )

    revenue_too_high = (
        inputs.audit_criteria is not None
        and to_decimal(inputs.audit_criteria.revenue) > config.corporate.sme_revenue_limit
    )
    has_sme_qualification_issue = inputs.has_foreign_ownership or revenue_too_high
    standard_rate = f"{config.corporate.standard_rate * 100:.0f}%"
    if inputs.has_foreign_ownership:
        warnings.append(
            "Your company may not qualify for SME tax rates due to foreign ownership. "
            f"Companies with 20% or more foreign ownership pay a flat {standard_rate} corporate tax rate. "
            "The Sdn Bhd calculation assumes SME rates, so actual tax may be higher."
        )
    elif revenue_too_high:
        warnings.append(
            "Your company may not qualify for SME tax rates due to high revenue. "
            f"Companies with revenue above {_rm(config.corporate.sme_revenue_limit)} pay a flat "
            f"{standard_rate} corporate tax rate. "
            "The Sdn Bhd calculation assumes SME rates, so actual tax may be higher."
        )

    which_is_better: Verdict
    if savings < similarity_threshold:
        which_is_better = "similar"
        recommendation = (
            f"Both structures are similar at your current profit. The difference is only {_rm(savings)}."
        )
    elif difference > 0:
        which_is_better = "sdn_bhd"
        recommendation = (
            f"Better to switch to Sdn Bhd now. You'll save {_rm(savings)} per year "
            "compared to staying as Enterprise."
        )
    else:
        which_is_better = "sole_prop"
        recommendation = f"Better to stay as Enterprise. You save {_rm(savings)} compared to switching to Sdn Bhd."

    if has_affordability_issue:
        recommendation = (
            "Warning: The Sdn Bhd scenario is not viable because your proposed salary exceeds "
            f"the company's capacity. Consider reducing salary to RM{max_monthly:,}/month or less."
        )
        if which_is_better == "sdn_bhd":
            which_is_better = "sole_prop"

    return ComparisonResult(
        which_is_better=which_is_better,
        difference=round_currency(difference),
        savings_if_switch=round_currency(savings),
        crossover_point_profit=calculate_crossover_point(inputs, business_profit, config),
        recommendation=recommendation,
        sole_prop_result=sole_prop_result,
        sdn_bhd_result=sdn_bhd_result,
        has_affordability_issue=has_affordability_issue,
        has_sme_qualification_issue=has_sme_qualification_issue,
        warnings=warnings,
    )


def resolve_business_profit(inputs: TaxCalculationInputs, tax_year: TaxYearConfig | None = None) -> Decimal:
    """Business profit to model, working backwards from a target in target mode.

    In target mode the monthly take-home target is annualised, the gross
    income that yields it under Enterprise tax is solved for, and other
    income is taken off.
    """
    if inputs.input_mode != "target":
        return inputs.business_profit

    target = inputs.target_net_income
    if target is None:
        target = to_decimal(load_yaml_config("comparison.yaml")["comparison"]["default_target_net_income"])
    total_reliefs = calculate_total_reliefs(inputs.reliefs if inputs.reliefs is not None else get_default_reliefs())
    required_gross = calculate_required_income_for_net_cash(target * 12, total_reliefs, tax_year)
    return max(Decimal("0"), required_gross - inputs.other_income)


def _comparison_key(inputs: TaxCalculationInputs, tax_year: TaxYearConfig | None = None) -> str:
    year = (tax_year or get_current_tax_year()).year_assessment
    return f"{year}:{inputs.model_dump_json()}"


def _calculate_comparison(inputs: TaxCalculationInputs, tax_year: TaxYearConfig | None = None) -> ComparisonResult:
    config = tax_year or get_current_tax_year()
    profit = resolve_business_profit(inputs, config)
    resolved = inputs.model_copy(update={"business_profit": profit})

    sole_prop = calculate_sole_prop_scenario(resolved, config)
    sdn_bhd = calculate_sdn_bhd_scenario(resolved, config)
    result = compare_scenarios(sole_prop, sdn_bhd, profit, resolved, config)
    logger.info(
        "Compared structures at profit %s (%s): %s, difference %s",
        profit,
        config.year_assessment,
        result.which_is_better,
        result.difference,
    )
    return result


# Results are shared between callers with identical inputs; treat as read-only.
calculate_comparison = memoize(_calculate_comparison, key_generator=_comparison_key)
