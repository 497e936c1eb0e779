"""Tunable analyzer settings.

The heuristic weights and keyword lists used during analysis are plain
defaults here; a YAML settings file can override any of them.
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from openapi_analyzer.errors import ConfigError

logger = logging.getLogger(__name__)


class AnalyzerSettings(BaseModel):
    """Heuristic constants for the analysis pipeline."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    core_resource_keywords: tuple[str, ...] = ("user", "account", "organization", "project", "product")
    pagination_param_names: tuple[str, ...] = ("page", "limit", "offset", "cursor")

    # complexity scoring
    params_per_complexity_point: int = Field(default=3, ge=1)
    large_body_property_threshold: int = Field(default=5, ge=0)
    many_responses_threshold: int = Field(default=3, ge=0)
    tool_complexity_threshold: int = Field(default=2, ge=0)

    recoverable_status_codes: tuple[str, ...] = ("429", "503", "504")
    rate_limit_headers: tuple[str, ...] = ("X-RateLimit-Limit", "RateLimit-Limit")

    # feature decisions
    sampling_workflow_threshold: int = Field(default=2, ge=0)
    context_relationship_threshold: int = Field(default=3, ge=0)
    error_intelligence_threshold: int = Field(default=5, ge=0)


DEFAULT_SETTINGS = AnalyzerSettings()


def load_settings(config_path: Path | None = None) -> AnalyzerSettings:
    """Load settings from a YAML file, or return the defaults.

    String values of the form ``${ENV_VAR}`` are replaced with the
    variable's value when it is set.
    """
    if config_path is None:
        return DEFAULT_SETTINGS

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration root must be a mapping: {config_path}")

    try:
        settings = AnalyzerSettings(**_expand_env_vars(raw))
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}") from e

    logger.debug("Loaded analyzer settings from %s", config_path)
    return settings


def dump_settings(settings: AnalyzerSettings = DEFAULT_SETTINGS) -> str:
    """Render settings as YAML, suitable for a starter config file."""
    data = {
        key: list(value) if isinstance(value, tuple) else value
        for key, value in settings.model_dump().items()
    }
    return yaml.safe_dump(data, sort_keys=False)


def _expand_env_vars(obj):
    if isinstance(obj, str):
        if obj.startswith("${") and obj.endswith("}"):
            value = os.getenv(obj[2:-1])
            return obj if value is None else value
        return obj
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj
