"""
Pydantic-based configuration system for propfirm-engine.

Loads configuration from YAML files, an override file merged over
config/default.yaml. Firm rule tables are code, not configuration.

Usage:
    from src.config import load_config
    config = load_config("config/default.yaml")
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, Field


# ── Sub-configs ─────────────────────────────────────────────────────────────


class EngineConfig(BaseModel):
    """Rule engine settings."""

    probe_sizes: List[float] = Field(
        default=[25_000, 50_000, 75_000, 100_000, 150_000, 250_000, 300_000],
        description="Account sizes probed when listing the tiers a firm supports",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = "logs/propfirm_engine.log"
    rotation: str = "10 MB"
    retention: str = "30 days"


# ── Root Config ─────────────────────────────────────────────────────────────


class AppConfig(BaseModel):
    """Root configuration for propfirm-engine."""

    engine: EngineConfig = EngineConfig()
    logging: LoggingConfig = LoggingConfig()


# ── Config Loading ──────────────────────────────────────────────────────────


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base dict."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_path: str | Path,
    default_path: str | Path | None = None,
) -> AppConfig:
    """Load configuration from YAML, merging with defaults.

    Missing files contribute nothing, so a fresh checkout runs on defaults.

    Args:
        config_path: Path to the override config.
        default_path: Path to default config. Auto-detected if None.

    Returns:
        Fully resolved AppConfig instance.
    """
    config_path = Path(config_path)

    if default_path is None:
        default_path = config_path.parent / "default.yaml"

    base_data: Dict[str, Any] = {}
    if Path(default_path).exists():
        with open(default_path, "r", encoding="utf-8") as f:
            base_data = yaml.safe_load(f) or {}

    override_data: Dict[str, Any] = {}
    if config_path.exists() and config_path.resolve() != Path(default_path).resolve():
        with open(config_path, "r", encoding="utf-8") as f:
            override_data = yaml.safe_load(f) or {}

    merged = _deep_merge(base_data, override_data)

    return AppConfig(**merged)
