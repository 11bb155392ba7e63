"""
Runtime defaults for the command line tool, read with pydantic-settings.

Every field can be overridden through an NPSCHED_-prefixed environment
variable (e.g. NPSCHED_LOG_LEVEL=DEBUG) or a .env file in the working
directory. Explicit CLI flags win over both.
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DEFAULT_ALGORITHM: Literal["fcfs", "sjf"] = "fcfs"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # ── Output ──────────────────────────────────────────────────
    DECIMALS: int = 2        # digits after the point for printed averages
    GANTT_WIDTH: int = 60    # terminal cells the timeline strip is scaled to

    model_config = {"env_prefix": "NPSCHED_", "env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("DEFAULT_ALGORITHM", "LOG_LEVEL", mode="before")
    @classmethod
    def normalize_case(cls, value, info):
        if not isinstance(value, str):
            return value
        return value.upper() if info.field_name == "LOG_LEVEL" else value.lower()


settings = Settings()
