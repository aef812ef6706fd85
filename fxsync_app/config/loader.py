"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    ApiParams,
    DashboardConfig,
    DisplayParams,
    FallbackParams,
    ForecastParams,
    HistoryParams,
    LoggingParams,
    PairParams,
    SchedulerParams,
    get_default_config,
)
from .validation import ConfigValidator, ValidationError

CONFIG_FILENAME = "dashboard.yaml"

_SECTIONS = {
    "api": ApiParams,
    "pairs": PairParams,
    "history": HistoryParams,
    "forecast": ForecastParams,
    "scheduler": SchedulerParams,
    "display": DisplayParams,
    "fallback": FallbackParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DashboardConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load deployment overrides from the YAML config file."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping at top level",
                context={"path": str(config_file)}
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. YAML file in the config directory
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> DashboardConfig:
        """Merge, validate and build a typed configuration."""
        merged = self.merge_config(overrides)

        errors = self._check_keys(merged)
        errors.extend(ConfigValidator.validate_config(merged))
        if errors:
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(
                    f"{err.field}: {err.message} (got: {err.value})" for err in errors
                ),
                errors=errors
            )

        sections = {}
        for name, section_cls in _SECTIONS.items():
            params = dict(merged[name])
            if name == "pairs":
                params["pairs"] = tuple(params["pairs"])
            sections[name] = section_cls(**params)

        return DashboardConfig(**sections)

    def _check_keys(self, config: dict[str, Any]) -> list[ValidationError]:
        """Report sections and keys that no dataclass field accepts."""
        errors = []

        for name, value in config.items():
            if name not in _SECTIONS:
                errors.append(ValidationError(
                    field=name, message="Unknown configuration section", value=value
                ))
                continue
            if not isinstance(value, dict):
                continue
            known = {f.name for f in fields(_SECTIONS[name])}
            for key in value:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{name}.{key}",
                        message="Unknown configuration key",
                        value=value[key]
                    ))

        return errors

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(config_dir: Optional[Path] = None,
                overrides: Optional[dict[str, Any]] = None) -> DashboardConfig:
    """Load the effective configuration."""
    return ConfigLoader.create(config_dir).load(overrides)
