"""Check every registered Year of Assessment for schedule and rate errors."""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import configure_logging
from sme_tax.rules.tax_years import CURRENT_TAX_YEAR, TAX_YEARS, validate_tax_year

configure_logging()
logger = logging.getLogger(__name__)


def main() -> int:
    """Log each YA's status; return non-zero if any entry is invalid."""
    if CURRENT_TAX_YEAR not in TAX_YEARS:
        logger.error("CURRENT_TAX_YEAR %s is not registered", CURRENT_TAX_YEAR)
        return 1

    failed = 0
    for year_label, config in TAX_YEARS.items():
        problems = validate_tax_year(config)
        if problems:
            failed += 1
            for problem in problems:
                logger.error("%s: %s", year_label, problem)
            continue

        logger.info(
            "%s OK (%d personal brackets, %d SME brackets)",
            year_label,
            len(config.personal.brackets),
            len(config.corporate.sme_brackets),
        )

    logger.info("Checked %d tax years, %d with problems.", len(TAX_YEARS), failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
