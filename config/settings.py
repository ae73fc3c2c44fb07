"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine configuration from environment variables."""

    log_level: str = "INFO"
    memo_cache_size: int = 100
    crossover_cache_size: int = 50

    model_config = {"env_file": ".env", "env_prefix": "SME_TAX_", "extra": "ignore"}


settings = Settings()
