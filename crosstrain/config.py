"""Engine configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
Tunables that govern how aggressively the plan is adjusted can be
overridden with CROSSTRAIN_* environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Replacement gating
    replace_threshold: float = 0.95     # credit must cover this fraction of a run's load
    conf_replace_min: float = 0.75      # minimum load confidence to allow replacement
    quality_replace_fraction: float = 0.80

    # Run preservation
    preserve_run_fraction: float = 0.55
    min_preserved_runs: int = 2

    # Saturation curve for replacement credit
    credit_max: float = 1500.0
    credit_tau: float = 800.0


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
        "conf_replace_min": 0.80,
    },
}


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        replace_threshold=float(os.getenv("CROSSTRAIN_REPLACE_THRESHOLD", "0.95")),
        conf_replace_min=float(
            os.getenv("CROSSTRAIN_CONF_REPLACE_MIN", str(profile.get("conf_replace_min", 0.75)))
        ),
        quality_replace_fraction=float(os.getenv("CROSSTRAIN_QUALITY_REPLACE_FRACTION", "0.80")),
        preserve_run_fraction=float(os.getenv("CROSSTRAIN_PRESERVE_RUN_FRACTION", "0.55")),
        min_preserved_runs=int(os.getenv("CROSSTRAIN_MIN_PRESERVED_RUNS", "2")),
        credit_max=float(os.getenv("CROSSTRAIN_CREDIT_MAX", "1500")),
        credit_tau=float(os.getenv("CROSSTRAIN_CREDIT_TAU", "800")),
    )
