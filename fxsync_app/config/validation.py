"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

KNOWN_PAIRS = ("USD/EUR", "USD/GBP", "USD/JPY", "EUR/GBP", "EUR/JPY", "GBP/JPY")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_api_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate remote endpoint parameters."""
        errors = []

        if "base_url" in params:
            value = params["base_url"]
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                errors.append(ValidationError(
                    field="api.base_url",
                    message="Must be an http(s) URL",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="api.timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_pair_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate tracked pair parameters."""
        errors = []
        pairs = params.get("pairs", KNOWN_PAIRS)

        if not isinstance(pairs, (list, tuple)) or not pairs:
            errors.append(ValidationError(
                field="pairs.pairs",
                message="Must be a non-empty list of currency pairs",
                value=pairs
            ))
            return errors

        unknown = [p for p in pairs if p not in KNOWN_PAIRS]
        if unknown:
            errors.append(ValidationError(
                field="pairs.pairs",
                message=f"Unknown pairs; supported: {', '.join(KNOWN_PAIRS)}",
                value=unknown
            ))

        if len(set(pairs)) != len(pairs):
            errors.append(ValidationError(
                field="pairs.pairs",
                message="Must not contain duplicates",
                value=pairs
            ))

        default_pair = params.get("default_pair")
        if default_pair is not None and default_pair not in pairs:
            errors.append(ValidationError(
                field="pairs.default_pair",
                message="Must be one of the configured pairs or null",
                value=default_pair
            ))

        return errors

    @staticmethod
    def validate_history_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate history query parameters."""
        errors = []

        if "limit" in params:
            value = params["limit"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="history.limit",
                    message="Must be a positive integer",
                    value=value
                ))

        if "period" in params:
            value = params["period"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="history.period",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_forecast_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate forecast request parameters."""
        errors = []

        if "horizon" in params:
            value = params["horizon"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="forecast.horizon",
                    message="Must be a positive integer",
                    value=value
                ))

        if "model" in params:
            value = params["model"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="forecast.model",
                    message="Must be a non-empty string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_scheduler_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate refresh scheduler parameters."""
        errors = []

        if "refresh_interval_seconds" in params:
            value = params["refresh_interval_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="scheduler.refresh_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_display_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate view model parameters."""
        errors = []

        if "news_display_limit" in params:
            value = params["news_display_limit"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="display.news_display_limit",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_fallback_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate synthetic data parameters."""
        errors = []

        for name in ("rate_jitter_pct", "change_jitter_pct",
                     "history_jitter_pct", "forecast_jitter_pct"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value >= 1:
                    errors.append(ValidationError(
                        field=f"fallback.{name}",
                        message="Must be a number in [0, 1)",
                        value=value
                    ))

        for name in ("confidence_start", "model_accuracy"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0 or value > 1:
                    errors.append(ValidationError(
                        field=f"fallback.{name}",
                        message="Must be a number between 0 and 1",
                        value=value
                    ))

        if "confidence_step" in params:
            value = params["confidence_step"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="fallback.confidence_step",
                    message="Must be a non-negative number",
                    value=value
                ))

        seed = params.get("seed")
        if seed is not None and not _is_int(seed):
            errors.append(ValidationError(
                field="fallback.seed",
                message="Must be an integer or null",
                value=seed
            ))

        volume_min = params.get("volume_min", 1)
        volume_max = params.get("volume_max", volume_min + 1)
        if not _is_int(volume_min) or not _is_int(volume_max) or volume_min < 0 \
                or volume_max <= volume_min:
            errors.append(ValidationError(
                field="fallback.volume_min",
                message="Volume range must satisfy 0 <= volume_min < volume_max",
                value=(volume_min, volume_max)
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in (
                "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
            ):
                errors.append(ValidationError(
                    field="logging.level",
                    message="Must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        sections = {
            "api": ConfigValidator.validate_api_params,
            "pairs": ConfigValidator.validate_pair_params,
            "history": ConfigValidator.validate_history_params,
            "forecast": ConfigValidator.validate_forecast_params,
            "scheduler": ConfigValidator.validate_scheduler_params,
            "display": ConfigValidator.validate_display_params,
            "fallback": ConfigValidator.validate_fallback_params,
            "logging": ConfigValidator.validate_logging_params,
        }

        for section, validate in sections.items():
            if section in config:
                params = config[section]
                if not isinstance(params, dict):
                    errors.append(ValidationError(
                        field=section,
                        message="Must be a mapping",
                        value=params
                    ))
                    continue
                errors.extend(validate(params))

        return errors
