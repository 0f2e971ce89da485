from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.canonical_fields import CanonicalField
from ..models.config_models import MetricsSettings, NormalizerSettings
from ..models.product_record import UNKNOWN

"""Config loader.

Responsibilities:
- Load YAML config (default config/catalogue.yml)
- Validate against config_schema.json (unknown keys are rejected)
- Apply defaults for every optional setting
- Let CATALOGUE_SOURCE override the configured source
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/catalogue.yml")
SOURCE_ENV_VAR = "CATALOGUE_SOURCE"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DashboardConfig:
    source: str | None
    settings: NormalizerSettings = field(default_factory=NormalizerSettings)

    @property
    def metrics(self) -> MetricsSettings:
        return self.settings.metrics


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_settings(data: dict[str, Any]) -> NormalizerSettings:
    m = data.get("metrics") or {}
    defaults = MetricsSettings()
    metrics = MetricsSettings(
        content_image_threshold=int(m.get("content_image_threshold", defaults.content_image_threshold)),
        weeks_per_year=float(m.get("weeks_per_year", defaults.weeks_per_year)),
        weeks_of_cover_cap=float(m.get("weeks_of_cover_cap", defaults.weeks_of_cover_cap)),
        vat_rate=float(m.get("vat_rate", defaults.vat_rate)),
    )
    aliases = {
        CanonicalField(name): tuple(names)
        for name, names in (data.get("header_aliases") or {}).items()
    }
    return NormalizerSettings(
        unknown_label=data.get("unknown_label", UNKNOWN),
        header_aliases=aliases,
        metrics=metrics,
        keep_raw_values=bool(data.get("keep_raw_values", False)),
    )


def config_from_dict(data: dict[str, Any]) -> DashboardConfig:
    _validate_config_schema(data)
    source = os.getenv(SOURCE_ENV_VAR) or data.get("source")
    return DashboardConfig(source=source, settings=_build_settings(data))


def load_config(path: Path = DEFAULT_CONFIG_PATH, *, required: bool = True) -> DashboardConfig:
    """Load and validate the YAML config.

    Args:
        path: YAML file location
        required: When False a missing file yields defaults instead of ConfigError
    """
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return config_from_dict({})
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return config_from_dict(data)
