"""Shared test fixtures."""

from decimal import Decimal

import pytest

from sme_tax.scenarios.compare import calculate_comparison, clear_crossover_cache
from sme_tax.scenarios.models import TaxCalculationInputs


@pytest.fixture(autouse=True)
def _clear_caches() -> None:
    """Keep memoized comparisons and crossover results from leaking between tests."""
    calculate_comparison.cache.clear()
    clear_crossover_cache()


@pytest.fixture
def basic_relief_only() -> dict[str, Decimal | None]:
    return {"basic": Decimal("9000")}


@pytest.fixture
def default_inputs() -> TaxCalculationInputs:
    """RM200k profit, RM5k/month salary, default reliefs and compliance costs."""
    return TaxCalculationInputs(business_profit=Decimal("200000"))
