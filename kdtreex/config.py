from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

_SUPPORTED_METRICS = {"squared_euclidean", "euclidean", "manhattan", "chebyshev"}
_SUPPORTED_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
_DEFAULT_METRIC = "squared_euclidean"
_DEFAULT_K = 1


def _bool_from_env(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_optional_int(raw: str | None) -> int | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid integer value '{raw}'") from exc


def _normalise_metric(value: str | None) -> str:
    if value is None or value.strip() == "":
        return _DEFAULT_METRIC
    metric = value.strip().lower()
    if metric not in _SUPPORTED_METRICS:
        raise ValueError(f"Unsupported metric '{metric}'. Expected one of {_SUPPORTED_METRICS}.")
    return metric


def _normalise_log_level(value: str | None) -> str:
    if value is None or value.strip() == "":
        return "INFO"
    level = value.strip().upper()
    if level not in _SUPPORTED_LOG_LEVELS:
        raise ValueError(f"Unsupported log level '{level}'. Expected one of {_SUPPORTED_LOG_LEVELS}.")
    return level


@dataclass(frozen=True)
class RuntimeConfig:
    log_level: str
    enable_diagnostics: bool
    metric: str
    default_k: int
    validate_points: bool

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        log_level = _normalise_log_level(os.getenv("KDTREEX_LOG_LEVEL"))
        enable_diagnostics = _bool_from_env(
            os.getenv("KDTREEX_ENABLE_DIAGNOSTICS"), default=True
        )
        metric = _normalise_metric(os.getenv("KDTREEX_METRIC"))
        raw_k = _parse_optional_int(os.getenv("KDTREEX_DEFAULT_K"))
        if raw_k is None:
            default_k = _DEFAULT_K
        elif raw_k <= 0:
            raise ValueError(f"KDTREEX_DEFAULT_K must be positive, got {raw_k}.")
        else:
            default_k = raw_k
        validate_points = _bool_from_env(
            os.getenv("KDTREEX_VALIDATE_POINTS"), default=True
        )
        return cls(
            log_level=log_level,
            enable_diagnostics=enable_diagnostics,
            metric=metric,
            default_k=default_k,
            validate_points=validate_points,
        )


def _configure_logging(level: str) -> None:
    logger = logging.getLogger("kdtreex")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        formatter = logging.Formatter("%(levelname)s %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)


@lru_cache(maxsize=None)
def runtime_config() -> RuntimeConfig:
    config = RuntimeConfig.from_env()
    _configure_logging(config.log_level)
    return config


def reset_runtime_config_cache() -> None:
    runtime_config.cache_clear()


def describe_runtime() -> Dict[str, Any]:
    """Return a serialisable view of the active runtime configuration."""

    config = runtime_config()
    return {
        "log_level": config.log_level,
        "enable_diagnostics": config.enable_diagnostics,
        "metric": config.metric,
        "default_k": config.default_k,
        "validate_points": config.validate_points,
    }


__all__ = [
    "RuntimeConfig",
    "describe_runtime",
    "reset_runtime_config_cache",
    "runtime_config",
]
