"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      - committed static defaults
  2. ``config/local.toml``        - optional local overrides (gitignored)
  3. ``.env``                     - local overrides (gitignored)
  4. Environment variables        - ``FORK_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Only operational bounds live here (traversal caps, concurrency, list sizes).
Scoring thresholds (badge rules, risk severities, suggestion bonuses) are
static tables under ``fork_engine.taxonomy`` so that every threshold change
shows up as a reviewed code diff rather than a silent config edit.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class LineageConfig(BaseModel):
    """Bounds applied to every fork-graph traversal.

    None of these are errors when exceeded: the walker truncates and reports
    the truncation through flags on its result.
    """

    model_config = ConfigDict(frozen=True)

    max_chain_length: int = 50          # parent-pointer hops before giving up
    max_children_per_node: int = 20     # fan-out cap per tree node
    default_max_depth: int = 5
    max_depth_limit: int = 10           # requested depths above this are clamped
    fetch_concurrency: int = 8          # concurrent child lookups per tree level
    descendant_preview_limit: int = 20  # direct forks shown in the lineage view

    @field_validator(
        "max_chain_length",
        "max_children_per_node",
        "fetch_concurrency",
        "descendant_preview_limit",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Lineage bound must be >= 1, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_depths(self) -> "LineageConfig":
        if self.default_max_depth < 0:
            raise ValueError("default_max_depth must be non-negative.")
        if self.default_max_depth > self.max_depth_limit:
            raise ValueError(
                f"default_max_depth ({self.default_max_depth}) must be <= "
                f"max_depth_limit ({self.max_depth_limit})."
            )
        return self


class ValidationConfig(BaseModel):
    """Cook-trial report sizing."""

    model_config = ConfigDict(frozen=True)

    recent_trials_limit: int = 5
    top_validated_limit: int = 5


class SuggestionConfig(BaseModel):
    """Smart suggestion list sizing."""

    model_config = ConfigDict(frozen=True)

    limit: int = 5


class AnalyticsConfig(BaseModel):
    """List sizes and windows for fork browsing and user analytics."""

    model_config = ConfigDict(frozen=True)

    inspired_page_size: int = 10
    gallery_page_size: int = 12
    trending_limit: int = 10
    comparison_fork_limit: int = 10
    top_list_limit: int = 5         # top forked recipes and top tags
    activity_months: int = 6        # trailing window for monthly activity

    @field_validator("*")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Analytics sizes must be >= 1, got {v}.")
        return v


class DataConfig(BaseModel):
    """Filesystem paths for snapshot data consumed by the CLI."""

    model_config = ConfigDict(frozen=True)

    snapshot_file: str = "data/snapshot.json"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration - the single source of truth.

    ``ForkEngine`` and every CLI command receive an ``AppConfig`` instance.
    It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    lineage: LineageConfig = LineageConfig()
    validation: ValidationConfig = ValidationConfig()
    suggestions: SuggestionConfig = SuggestionConfig()
    analytics: AnalyticsConfig = AnalyticsConfig()
    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply FORK_ENGINE_* environment variable overrides
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply FORK_ENGINE_* env vars to the raw config dict.

    Supported overrides:
      FORK_ENGINE_SNAPSHOT   → raw["data"]["snapshot_file"]
      FORK_ENGINE_LOG_LEVEL  → raw["logging"]["level"]
      FORK_ENGINE_DEBUG      → raw["debug"]
    """
    if snapshot := os.environ.get("FORK_ENGINE_SNAPSHOT"):
        raw.setdefault("data", {})["snapshot_file"] = snapshot

    if log_level := os.environ.get("FORK_ENGINE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("FORK_ENGINE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        lineage=LineageConfig(**raw.get("lineage", {})),
        validation=ValidationConfig(**raw.get("validation", {})),
        suggestions=SuggestionConfig(**raw.get("suggestions", {})),
        analytics=AnalyticsConfig(**raw.get("analytics", {})),
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
