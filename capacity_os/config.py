"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("./data")


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""

    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)

    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Cache settings
    cache_ttl_seconds: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "300")))

    # Capacity model
    trailing_window_days: int = field(default_factory=lambda: int(os.getenv("TRAILING_WINDOW_DAYS", "30")))
    projection_months: int = field(default_factory=lambda: int(os.getenv("PROJECTION_MONTHS", "6")))
    approaching_margin_pct: float = field(default_factory=lambda: float(os.getenv("APPROACHING_MARGIN_PCT", "5")))
    trend_weeks: int = 4
    top_charge_codes: int = 5

    @property
    def processed_dir(self) -> Path:
        return self.data_dir / "processed"

    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


# Table file names
TABLE_FILES = {
    "time_entries": "time_entries",
}

# Required columns (hard fail if missing)
REQUIRED_COLUMNS = {
    "time_entries": [
        "id",
        "charge_code",
        "category",
        "duration_minutes",
        "timestamp",
    ],
}

# Optional columns (soft warn if missing)
OPTIONAL_COLUMNS = {
    "time_entries": [
        "notes",
        "user_email",
    ],
}

# Store column names -> canonical names
COLUMN_ALIASES = {
    "chargeCode": "charge_code",
    "duration": "duration_minutes",
    "durationMinutes": "duration_minutes",
    "userEmail": "user_email",
    "user_id": "user_email",
}

# Assumption defaults (per month)
DEFAULT_ASSUMPTIONS = {
    "active_clients": 120,
    "monthly_growth_pct": 5.0,
    "capacity_per_head": 140.0,
    "target_utilisation_pct": 85.0,
    "headcount": {
        "advisors": 4,
        "support": 2,
        "preparers": 4,
        "reviewers": 2,
    },
    "hours_per_client": {
        "advisors": 5.5,
        "support": 2.0,
        "preparers": 5.5,
        "reviewers": 2.0,
    },
    "avg_client_fee": {
        "planning": 350.0,
        "preparation": 333.0,
    },
    # Preparation fees are quoted per year
    "fee_is_annual": {
        "planning": False,
        "preparation": True,
    },
}

# Formatting constants
FORMAT_CURRENCY = "${:,.0f}"
FORMAT_HOURS = "{:,.1f}"
FORMAT_PERCENT = "{:.1f}%"
FORMAT_COUNT = "{:,}"
NOT_AVAILABLE = "N/A"
