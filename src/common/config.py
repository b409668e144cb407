"""Helpers for loading runtime configuration."""
from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import BackendError, ErrorCode
from .models import GlobalSettings, RuntimeConfig

# "replace" is excluded: substituted characters would change byte lengths of sorted lines
ALLOWED_ERROR_POLICIES = {"strict", "surrogateescape"}


@dataclass(slots=True)
class ConfigDocument:
    source: Path
    version: int
    global_settings: GlobalSettings
    delimiters: Dict[str, str]


def load_runtime_config(
    config_path: Optional[Path] = None,
    *,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> RuntimeConfig:
    """Load configuration JSON when a path is given, else return the built-in defaults."""

    if config_path is None:
        overrides = overrides or {}
        return RuntimeConfig(
            global_settings=_build_global_settings(overrides.get("global") or {}, Path("<defaults>")),
            delimiters=dict(overrides.get("delimiters") or {}),
        )

    document = load_config_document(config_path, overrides=overrides)
    return RuntimeConfig(
        global_settings=document.global_settings,
        delimiters=document.delimiters,
        source=document.source,
    )


def load_config_document(
    config_path: Path,
    *,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ConfigDocument:
    raw = _read_config_json(config_path)
    if not isinstance(raw, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{config_path}' must hold a JSON object")

    version = _require_positive_int(raw.get("version"), "version", config_path)

    overrides = overrides or {}
    global_section = raw.get("global", {}) or {}
    if not isinstance(global_section, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'global' must be an object in {config_path}")
    global_data = {**global_section, **(overrides.get("global") or {})}
    global_settings = _build_global_settings(global_data, config_path)

    delimiters_section = raw.get("delimiters", {}) or {}
    if not isinstance(delimiters_section, Mapping):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"'delimiters' must be an object in {config_path}")
    merged = {**delimiters_section, **(overrides.get("delimiters") or {})}
    delimiters: Dict[str, str] = {}
    for extension, delimiter in merged.items():
        key = _require_string(extension, "delimiters key", config_path).lstrip(".").lower()
        delimiters[key] = _require_string(delimiter, f"delimiters.{extension}", config_path)

    return ConfigDocument(
        source=config_path,
        version=version,
        global_settings=global_settings,
        delimiters=delimiters,
    )


# ---------------------------------------------------------------------------
# Internal helpers


def _read_config_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' not found") from exc
    except json.JSONDecodeError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Config file '{path}' is not valid JSON: {exc}") from exc


def _build_global_settings(data: Mapping[str, Any], source: Path) -> GlobalSettings:
    defaults = GlobalSettings()
    encoding = _require_encoding(data.get("encoding", defaults.encoding), source)
    error_policy = _normalize_error_policy(data.get("error_policy", defaults.error_policy), source)
    default_delimiter = _require_string(
        data.get("default_delimiter", defaults.default_delimiter),
        "global.default_delimiter",
        source,
    )
    return GlobalSettings(
        encoding=encoding,
        error_policy=error_policy,
        default_delimiter=default_delimiter,
    )


def _require_encoding(value: Any, source: Path) -> str:
    encoding = _require_string(value, "global.encoding", source)
    try:
        codecs.lookup(encoding)
        newline = "\n".encode(encoding)
    except LookupError as exc:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"Unknown encoding '{encoding}' in {source}") from exc
    # lines are split on the raw newline byte
    if newline != b"\n":
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Encoding '{encoding}' in {source} does not encode newline as a single 0x0A byte",
        )
    return encoding


def _normalize_error_policy(value: Any, source: Path) -> str:
    policy = _require_string(value, "global.error_policy", source).lower()
    if policy not in ALLOWED_ERROR_POLICIES:
        allowed = ", ".join(sorted(ALLOWED_ERROR_POLICIES))
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"Unsupported error_policy '{value}' in {source}. Allowed: {allowed}",
        )
    return policy


def _require_string(value: Any, field: str, source: Path) -> str:
    if not isinstance(value, str):
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be a string in {source}")
    text = value.strip()
    if not text:
        raise BackendError(ErrorCode.CONFIG_ERROR, f"{field} must be non-empty in {source}")
    return text


def _require_positive_int(value: Any, field: str, source: Path) -> int:
    try:
        num = int(value)
    except (TypeError, ValueError) as exc:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be an integer in {source}",
        ) from exc
    if num <= 0:
        raise BackendError(
            ErrorCode.CONFIG_ERROR,
            f"{field} must be greater than zero in {source}",
        )
    return num
