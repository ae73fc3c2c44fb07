"""Configuration loading utilities."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from config.settings import settings

CONFIG_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML config file from the config/ directory.

    Parsed once per process; callers must treat the result as read-only.
    """
    with open(CONFIG_DIR / filename) as f:
        return yaml.safe_load(f)


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for scripts, defaulting to SME_TAX_LOG_LEVEL."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(levelname)s: %(message)s",
    )
