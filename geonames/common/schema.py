"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from geonames.common.errors import ConfigError

TOP_LEVEL_KEYS = {"download", "webservice", "logging"}
DOWNLOAD_KEYS = {"base_url", "timeout_seconds", "max_line_bytes", "retry_attempts"}
WEBSERVICE_KEYS = {"username", "base_url", "timeout_seconds", "retry_attempts"}
LOGGING_KEYS = {"level", "path"}
LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(obj: dict, key: str, ctx: str) -> None:
    if key not in obj:
        return
    value = obj[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx}.{key} must be a positive number")


def _assert_string(obj: dict, key: str, ctx: str) -> None:
    if key in obj and not isinstance(obj[key], str):
        raise ConfigError(f"{ctx}.{key} must be a string")


def validate_client_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "client config")
    _assert_no_unknown_keys(cfg, TOP_LEVEL_KEYS, "client config", allow_unknown)

    download = _assert_mapping(cfg.get("download") or {}, "download")
    _assert_no_unknown_keys(download, DOWNLOAD_KEYS, "download", allow_unknown)
    _assert_string(download, "base_url", "download")
    for key in ("timeout_seconds", "max_line_bytes", "retry_attempts"):
        _assert_positive_number(download, key, "download")

    webservice = _assert_mapping(cfg.get("webservice") or {}, "webservice")
    _assert_no_unknown_keys(webservice, WEBSERVICE_KEYS, "webservice", allow_unknown)
    for key in ("username", "base_url"):
        _assert_string(webservice, key, "webservice")
    for key in ("timeout_seconds", "retry_attempts"):
        _assert_positive_number(webservice, key, "webservice")

    logging_cfg = _assert_mapping(cfg.get("logging") or {}, "logging")
    _assert_no_unknown_keys(logging_cfg, LOGGING_KEYS, "logging", allow_unknown)
    level = logging_cfg.get("level")
    if level is not None and str(level).upper() not in LOG_LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(sorted(LOG_LEVELS))}")
    _assert_string(logging_cfg, "path", "logging")

    return cfg
