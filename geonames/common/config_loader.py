"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from geonames.common.constants import (
    DUMP_BASE_URL,
    DUMP_TIMEOUT_SECONDS,
    MAX_LINE_BYTES,
    WEBSERVICE_BASE_URL,
    WEBSERVICE_TIMEOUT_SECONDS,
)
from geonames.common.errors import ConfigError
from geonames.common.fs import read_yaml
from geonames.common.schema import validate_client_config


@dataclass(frozen=True)
class DownloadSettings:
    base_url: str = DUMP_BASE_URL
    timeout_seconds: float = DUMP_TIMEOUT_SECONDS
    max_line_bytes: int = MAX_LINE_BYTES
    retry_attempts: int = 1


@dataclass(frozen=True)
class WebServiceSettings:
    username: str = ""
    base_url: str = WEBSERVICE_BASE_URL
    timeout_seconds: float = WEBSERVICE_TIMEOUT_SECONDS
    retry_attempts: int = 1


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    path: str | None = None


@dataclass(frozen=True)
class ClientSettings:
    download: DownloadSettings = field(default_factory=DownloadSettings)
    webservice: WebServiceSettings = field(default_factory=WebServiceSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    base = read_yaml(path) or {}
    if not isinstance(base, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config file {overlay_path} must contain a mapping")
    return _deep_merge(base, overlay)


def settings_from_mapping(cfg: dict, *, allow_unknown: bool = False) -> ClientSettings:
    validate_client_config(cfg, allow_unknown=allow_unknown)
    download = cfg.get("download") or {}
    webservice = cfg.get("webservice") or {}
    logging_cfg = cfg.get("logging") or {}
    return ClientSettings(
        download=DownloadSettings(
            base_url=download.get("base_url", DUMP_BASE_URL),
            timeout_seconds=float(download.get("timeout_seconds", DUMP_TIMEOUT_SECONDS)),
            max_line_bytes=int(download.get("max_line_bytes", MAX_LINE_BYTES)),
            retry_attempts=int(download.get("retry_attempts", 1)),
        ),
        webservice=WebServiceSettings(
            username=webservice.get("username", ""),
            base_url=webservice.get("base_url", WEBSERVICE_BASE_URL),
            timeout_seconds=float(webservice.get("timeout_seconds", WEBSERVICE_TIMEOUT_SECONDS)),
            retry_attempts=int(webservice.get("retry_attempts", 1)),
        ),
        logging=LoggingSettings(
            level=str(logging_cfg.get("level", "INFO")).upper(),
            path=logging_cfg.get("path"),
        ),
    )


def load_settings(
    path: Path | None = None,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> ClientSettings:
    if path is None:
        return ClientSettings()
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    return settings_from_mapping(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)
