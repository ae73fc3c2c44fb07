"""Progressive (tiered) tax calculation shared by personal and corporate tax."""

from decimal import Decimal
from typing import NamedTuple

from sme_tax.utils.rounding import Number, round_currency, to_decimal


class TaxBracket(NamedTuple):
    """A single progressive tax bracket."""

    lower: Decimal  # inclusive
    upper: Decimal | None  # None = no cap
    rate: Decimal


class BracketBreakdown(NamedTuple):
    """How much of an amount fell into one bracket and the tax on it."""

    bracket_min: Decimal
    bracket_max: Decimal | None
    rate: Decimal
    amount_in_bracket: Decimal
    tax_for_bracket: Decimal


class ProgressiveTaxResult(NamedTuple):
    tax: Decimal
    breakdown: list[BracketBreakdown]


def _amounts_in_brackets(
    amount: Decimal,
    brackets: tuple[TaxBracket, ...] | list[TaxBracket],
) -> list[tuple[TaxBracket, Decimal]]:
    """Pair each bracket reached by ``amount`` with the portion inside it.

    Brackets must be contiguous and ascending; nothing here checks that.
    """
    portions: list[tuple[TaxBracket, Decimal]] = []
    for bracket in brackets:
        if amount <= bracket.lower:
            break

        in_bracket = amount - bracket.lower
        if bracket.upper is not None:
            in_bracket = min(in_bracket, bracket.upper - bracket.lower)

        if in_bracket > 0:
            portions.append((bracket, in_bracket))
    return portions


def calculate_progressive_tax(
    taxable_amount: Number,
    brackets: tuple[TaxBracket, ...] | list[TaxBracket],
) -> Decimal:
    """Calculate tax on ``taxable_amount`` across progressive brackets.

    The bracket rate applies only to the part of the amount inside that
    bracket. The unrounded per-bracket taxes are summed, then the total is
    rounded to 2 dp.

    Args:
        taxable_amount: Chargeable income or profit. Zero or negative gives 0.
        brackets: Contiguous brackets ordered by ``lower``.

    Returns:
        Total tax rounded to 2 decimal places.
    """
    amount = to_decimal(taxable_amount)
    if amount <= 0:
        return Decimal("0")

    tax = sum(
        (portion * bracket.rate for bracket, portion in _amounts_in_brackets(amount, brackets)),
        Decimal("0"),
    )
    return round_currency(tax)


def get_progressive_tax_breakdown(
    taxable_amount: Number,
    brackets: tuple[TaxBracket, ...] | list[TaxBracket],
) -> list[BracketBreakdown]:
    """Bracket-by-bracket breakdown; empty for zero or negative amounts."""
    amount = to_decimal(taxable_amount)
    if amount <= 0:
        return []

    return [
        BracketBreakdown(
            bracket_min=bracket.lower,
            bracket_max=bracket.upper,
            rate=bracket.rate,
            amount_in_bracket=round_currency(portion),
            tax_for_bracket=round_currency(portion * bracket.rate),
        )
        for bracket, portion in _amounts_in_brackets(amount, brackets)
    ]


def calculate_progressive_tax_with_breakdown(
    taxable_amount: Number,
    brackets: tuple[TaxBracket, ...] | list[TaxBracket],
) -> ProgressiveTaxResult:
    """Tax and breakdown in one pass.

    Here the total is the sum of the already-rounded per-bracket taxes, so it
    can differ from ``calculate_progressive_tax`` by a few sen.
    """
    breakdown = get_progressive_tax_breakdown(taxable_amount, brackets)
    tax = sum((item.tax_for_bracket for item in breakdown), Decimal("0"))
    return ProgressiveTaxResult(tax=round_currency(tax), breakdown=breakdown)
