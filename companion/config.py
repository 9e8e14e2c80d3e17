"""Settings for the companion: config/settings.yaml plus environment overrides.

``CONSECRATION_LANGUAGE`` and ``CONSECRATION_DATA_DIR`` may be set in the
shell or in ``config/.env``; they are collected under ``cfg["_env"]`` and
applied by :class:`companion.core.Companion`.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

# settings key -> environment variable
ENV_OVERRIDES = {
    "language": "CONSECRATION_LANGUAGE",
    "data_dir": "CONSECRATION_DATA_DIR",
}


def load_config(config_dir: str | Path | None = None) -> dict:
    """Read settings.yaml from ``config_dir`` and attach the environment overrides."""
    config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR

    # variables already in the environment win over .env
    load_dotenv(config_dir / ".env")

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{settings_path} must contain a mapping of settings")

    cfg["_env"] = {key: os.getenv(var, "") for key, var in ENV_OVERRIDES.items()}
    return cfg
