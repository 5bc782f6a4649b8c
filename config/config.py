"""
Configuration classes for the inventory dashboard.
Defines oracle and storage settings in a type-safe, extensible way.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from utils.env import load_project_dotenv

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"


@dataclass
class OracleConfig:
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    timeout_seconds: float = 30.0
    retry_attempts: int = 2
    retry_backoff: float = 1.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY


@dataclass
class DashboardConfig:
    storage_path: Path = Path(".nexusinv") / "storage.json"
    storage_key: str = "nexusinv_products"
    default_location: str = "Chennai"
    oracle: OracleConfig = field(default_factory=OracleConfig)

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """Build a config from the environment after loading the project `.env`."""
        load_project_dotenv()
        defaults = cls()
        oracle = OracleConfig(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("NEXUSINV_MODEL", OracleConfig.model),
            timeout_seconds=float(os.getenv("NEXUSINV_ORACLE_TIMEOUT", OracleConfig.timeout_seconds)),
        )
        return cls(
            storage_path=Path(os.getenv("NEXUSINV_STORAGE_PATH", str(defaults.storage_path))),
            default_location=os.getenv("NEXUSINV_DEFAULT_LOCATION", defaults.default_location),
            oracle=oracle,
        )


# Example usage:
# config = DashboardConfig.from_env()
# oracle = OpenAIOracle(config.oracle)
