"""Malaysian tax constants by Year of Assessment.

Hardcoded Python constants, one ``TaxYearConfig`` per YA. Every rule module
reads its rates from here, so a new YA means a new entry in ``TAX_YEARS``
and a new ``CURRENT_TAX_YEAR``; no calculation code changes.

Sources: LHDN personal and SME schedules, EPF Act 1991, PERKESO rates
(wage ceiling raised to RM6,000 from Oct 2024), Budget 2025 dividend
surcharge, Companies Act 2016 s267 audit exemption.
"""

from decimal import Decimal
from typing import NamedTuple

from sme_tax.rules.progressive import TaxBracket


class ReliefLimits(NamedTuple):
    """Personal relief caps (RM)."""

    basic: Decimal
    epf_and_life_insurance: Decimal  # combined cap
    medical: Decimal
    spouse: Decimal  # spouse without income
    children: Decimal  # per child
    education: Decimal  # per child


class PersonalTaxConfig(NamedTuple):
    brackets: tuple[TaxBracket, ...]
    relief_limits: ReliefLimits


class CorporateTaxConfig(NamedTuple):
    sme_brackets: tuple[TaxBracket, ...]
    standard_rate: Decimal  # non-SME flat rate
    sme_revenue_limit: Decimal  # revenue above this loses SME rates


class EPFConfig(NamedTuple):
    """Employees Provident Fund contribution rates."""

    employee_rate: Decimal
    employer_rate_low: Decimal  # monthly salary <= threshold
    employer_rate_high: Decimal  # monthly salary > threshold
    salary_threshold: Decimal  # monthly
    max_relief_contribution: Decimal


class SOCSOConfig(NamedTuple):
    """Simplified PERKESO rates; contributions stop above the wage ceiling."""

    employer_rate: Decimal
    employee_rate: Decimal
    wage_threshold: Decimal  # monthly


class DividendConfig(NamedTuple):
    threshold: Decimal
    surcharge_rate: Decimal  # on the excess over threshold


class ZakatConfig(NamedTuple):
    rate: Decimal
    nisab_threshold: Decimal  # 85g gold
    max_business_deduction_rate: Decimal  # of aggregate income


class AuditConfig(NamedTuple):
    """Audit exemption limits; a company must be within all three."""

    max_revenue: Decimal
    max_total_assets: Decimal
    max_employees: int


class TaxYearConfig(NamedTuple):
    """All tax parameters for a single Year of Assessment."""

    year_assessment: str
    personal: PersonalTaxConfig
    corporate: CorporateTaxConfig
    epf: EPFConfig
    socso: SOCSOConfig
    dividend: DividendConfig
    zakat: ZakatConfig
    audit: AuditConfig


_PERSONAL_BRACKETS_2024 = (
    TaxBracket(Decimal("0"), Decimal("5000"), Decimal("0")),
    TaxBracket(Decimal("5000"), Decimal("20000"), Decimal("0.01")),
    TaxBracket(Decimal("20000"), Decimal("35000"), Decimal("0.03")),
    TaxBracket(Decimal("35000"), Decimal("50000"), Decimal("0.06")),
    TaxBracket(Decimal("50000"), Decimal("70000"), Decimal("0.11")),
    TaxBracket(Decimal("70000"), Decimal("100000"), Decimal("0.19")),
    TaxBracket(Decimal("100000"), Decimal("250000"), Decimal("0.25")),
    TaxBracket(Decimal("250000"), Decimal("400000"), Decimal("0.26")),
    TaxBracket(Decimal("400000"), Decimal("600000"), Decimal("0.28")),
    TaxBracket(Decimal("600000"), None, Decimal("0.30")),
)

# Resident SME: paid-up capital <= RM2.5M, revenue <= RM50M
_SME_BRACKETS_2024 = (
    TaxBracket(Decimal("0"), Decimal("150000"), Decimal("0.15")),
    TaxBracket(Decimal("150000"), Decimal("600000"), Decimal("0.17")),
    TaxBracket(Decimal("600000"), None, Decimal("0.24")),
)

YA_2024_2025 = TaxYearConfig(
    year_assessment="YA2024-2025",
    personal=PersonalTaxConfig(
        brackets=_PERSONAL_BRACKETS_2024,
        relief_limits=ReliefLimits(
            basic=Decimal("9000"),
            epf_and_life_insurance=Decimal("7000"),
            medical=Decimal("8000"),
            spouse=Decimal("4000"),
            children=Decimal("2000"),
            education=Decimal("8000"),
        ),
    ),
    corporate=CorporateTaxConfig(
        sme_brackets=_SME_BRACKETS_2024,
        standard_rate=Decimal("0.24"),
        sme_revenue_limit=Decimal("50000000"),
    ),
    epf=EPFConfig(
        employee_rate=Decimal("0.11"),
        employer_rate_low=Decimal("0.13"),
        employer_rate_high=Decimal("0.12"),
        salary_threshold=Decimal("5000"),
        max_relief_contribution=Decimal("7000"),
    ),
    socso=SOCSOConfig(
        employer_rate=Decimal("0.0175"),
        employee_rate=Decimal("0.005"),
        wage_threshold=Decimal("6000"),  # from Oct 2024, was RM5,000
    ),
    dividend=DividendConfig(
        threshold=Decimal("100000"),
        surcharge_rate=Decimal("0.02"),
    ),
    zakat=ZakatConfig(
        rate=Decimal("0.025"),
        nisab_threshold=Decimal("29961"),  # 85g x RM352.48
        max_business_deduction_rate=Decimal("0.025"),
    ),
    audit=AuditConfig(
        max_revenue=Decimal("100000"),
        max_total_assets=Decimal("300000"),
        max_employees=5,
    ),
)

TAX_YEARS: dict[str, TaxYearConfig] = {
    "YA2024-2025": YA_2024_2025,
}

CURRENT_TAX_YEAR = "YA2024-2025"


def get_current_tax_year() -> TaxYearConfig:
    return TAX_YEARS[CURRENT_TAX_YEAR]


def get_tax_year(year: str) -> TaxYearConfig | None:
    """Look up a YA by key, e.g. "YA2024-2025". Unknown keys give None."""
    return TAX_YEARS.get(year)


def get_available_tax_years() -> list[str]:
    return list(TAX_YEARS)


def validate_brackets(brackets: tuple[TaxBracket, ...] | list[TaxBracket]) -> list[str]:
    """Check a schedule is usable by the progressive calculator.

    Returns:
        Human-readable problems; empty when the schedule is valid.
    """
    if not brackets:
        return ["schedule has no brackets"]

    problems: list[str] = []
    if brackets[0].lower != 0:
        problems.append(f"first bracket starts at {brackets[0].lower}, expected 0")

    for index, bracket in enumerate(brackets):
        if not Decimal("0") <= bracket.rate <= Decimal("1"):
            problems.append(f"bracket {index} rate {bracket.rate} outside [0, 1]")

        is_last = index == len(brackets) - 1
        if bracket.upper is None:
            if not is_last:
                problems.append(f"bracket {index} is unbounded but not last")
            continue
        if bracket.upper <= bracket.lower:
            problems.append(f"bracket {index} upper {bracket.upper} <= lower {bracket.lower}")
        if is_last:
            problems.append("last bracket must be unbounded")
        elif brackets[index + 1].lower != bracket.upper:
            problems.append(
                f"gap between bracket {index} (upper {bracket.upper}) "
                f"and bracket {index + 1} (lower {brackets[index + 1].lower})"
            )

    return problems


def _check_rate(name: str, rate: Decimal) -> list[str]:
    if Decimal("0") <= rate <= Decimal("1"):
        return []
    return [f"{name} {rate} outside [0, 1]"]


def validate_tax_year(config: TaxYearConfig) -> list[str]:
    """Check a registry entry is internally consistent."""
    problems = [f"personal: {p}" for p in validate_brackets(config.personal.brackets)]
    problems += [f"corporate: {p}" for p in validate_brackets(config.corporate.sme_brackets)]

    problems += _check_rate("corporate standard rate", config.corporate.standard_rate)
    problems += _check_rate("EPF employee rate", config.epf.employee_rate)
    problems += _check_rate("EPF employer low rate", config.epf.employer_rate_low)
    problems += _check_rate("EPF employer high rate", config.epf.employer_rate_high)
    problems += _check_rate("SOCSO employer rate", config.socso.employer_rate)
    problems += _check_rate("SOCSO employee rate", config.socso.employee_rate)
    problems += _check_rate("dividend surcharge rate", config.dividend.surcharge_rate)
    problems += _check_rate("zakat rate", config.zakat.rate)
    problems += _check_rate("zakat deduction rate", config.zakat.max_business_deduction_rate)

    relief_values = config.personal.relief_limits
    problems += [
        f"relief limit {name} is negative"
        for name, value in relief_values._asdict().items()
        if value < 0
    ]
    return problems
