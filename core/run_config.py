"""Run configuration loading and validation.

Settings come from an optional YAML/JSON config file, then ``ARCHLENS_*``
environment variables, then the command line. Malformed settings fall back
to defaults with a warning, unless strict validation is enabled, in which case
``ConfigValidationError`` is raised.

Example config file::

    include: ["App.*"]
    exclude: ["*.Tests"]
    output: out/model.json
    max_workers: 4
    report_dir: out/reports
    resolve_interface_bases: false
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "ARCHLENS_CONFIG"
ENV_MAX_WORKERS = "ARCHLENS_MAX_WORKERS"
ENV_LOG_LEVEL = "ARCHLENS_LOG_LEVEL"
ENV_REPORT_DIR = "ARCHLENS_REPORT_DIR"
ENV_STRICT = "ARCHLENS_STRICT_CONFIG_VALIDATION"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigValidationError(RuntimeError):
    """Raised when strict config validation fails."""


@dataclass(frozen=True)
class RunConfig:
    """Effective settings for one extraction run."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    output: Optional[str] = None
    max_workers: int = 1
    continue_on_error: bool = True
    reject_syntax_errors: bool = False
    resolve_interface_bases: bool = True
    report_dir: Optional[str] = None
    log_level: str = "INFO"


_KNOWN_KEYS = {f.name for f in dataclasses.fields(RunConfig)}
_BOOL_KEYS = {"continue_on_error", "reject_syntax_errors", "resolve_interface_bases"}


def _env_flag(name: str, default: bool = False, environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(
    default: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    """Resolve strict validation mode from ``ARCHLENS_STRICT_CONFIG_VALIDATION``."""
    return _env_flag(ENV_STRICT, default=default, environ=environ)


def _reject(msg: str, strict: bool, exc: Optional[BaseException] = None) -> None:
    if strict:
        raise ConfigValidationError(msg) from exc
    logger.warning("%s; continuing with defaults", msg)


def load_config_payload(config_path: str, strict: bool = False) -> dict[str, Any]:
    """Load a config file as a mapping, choosing JSON or YAML by suffix.

    In non-strict mode this returns an empty dict on read/parse failures.
    """
    path = Path(config_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        _reject(f"Config file not readable: {config_path}", strict, exc)
        return {}

    try:
        if path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        _reject(f"Failed to parse config file {config_path}: {exc}", strict, exc)
        return {}

    if payload is None:
        logger.info("Config file %s is empty", config_path)
        return {}

    if not isinstance(payload, dict):
        _reject(f"Config file {config_path} must contain a mapping", strict)
        return {}

    return payload


def _parse_patterns(value: Any, key: str, strict: bool) -> Optional[tuple[str, ...]]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        _reject(f"'{key}' must be a string or list of strings", strict)
        return None
    return tuple(v.strip() for v in value if v.strip())


def _parse_workers(value: Any, key: str, strict: bool) -> Optional[int]:
    try:
        workers = int(value)
    except (TypeError, ValueError):
        _reject(f"'{key}' must be an integer, got {value!r}", strict)
        return None
    if workers < 1:
        _reject(f"'{key}' must be at least 1, got {workers}", strict)
        return None
    return workers


def _parse_log_level(value: Any, key: str, strict: bool) -> Optional[str]:
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        _reject(f"'{key}' must be one of {', '.join(LOG_LEVELS)}, got {value!r}", strict)
        return None
    return level


def parse_run_config(
    payload: Mapping[str, Any],
    strict: bool = False,
    base: Optional[RunConfig] = None,
) -> RunConfig:
    """Build a RunConfig from a config mapping layered over ``base``."""
    config = base or RunConfig()
    updates: dict[str, Any] = {}

    for key, value in payload.items():
        if key not in _KNOWN_KEYS:
            _reject(f"Unknown config key '{key}'", strict)
            continue

        if key in ("include", "exclude"):
            parsed = _parse_patterns(value, key, strict)
        elif key == "max_workers":
            parsed = _parse_workers(value, key, strict)
        elif key == "log_level":
            parsed = _parse_log_level(value, key, strict)
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                _reject(f"'{key}' must be true or false", strict)
                continue
            parsed = value
        else:
            parsed = str(value).strip() if value is not None else None
            parsed = parsed or None

        if parsed is not None or key in ("output", "report_dir"):
            updates[key] = parsed

    return dataclasses.replace(config, **updates)


def apply_env_overrides(
    config: RunConfig,
    environ: Optional[Mapping[str, str]] = None,
    strict: bool = False,
) -> RunConfig:
    """Layer ``ARCHLENS_*`` environment variables over a config."""
    env = os.environ if environ is None else environ
    updates: dict[str, Any] = {}

    raw_workers = env.get(ENV_MAX_WORKERS)
    if raw_workers:
        workers = _parse_workers(raw_workers, ENV_MAX_WORKERS, strict)
        if workers is not None:
            updates["max_workers"] = workers

    raw_level = env.get(ENV_LOG_LEVEL)
    if raw_level:
        level = _parse_log_level(raw_level, ENV_LOG_LEVEL, strict)
        if level is not None:
            updates["log_level"] = level

    raw_report_dir = env.get(ENV_REPORT_DIR, "").strip()
    if raw_report_dir:
        updates["report_dir"] = raw_report_dir

    return dataclasses.replace(config, **updates)


def load_run_config(
    config_path: Optional[str] = None,
    strict: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Resolve file and environment settings into a RunConfig.

    Args:
        config_path: Explicit config file; falls back to ``ARCHLENS_CONFIG``.
        strict: Raise ConfigValidationError instead of warning.
        environ: Environment mapping, ``os.environ`` by default.
    """
    env = os.environ if environ is None else environ
    config_path = config_path or env.get(ENV_CONFIG_PATH) or None

    config = RunConfig()
    if config_path:
        payload = load_config_payload(config_path, strict=strict)
        config = parse_run_config(payload, strict=strict, base=config)
        logger.debug("Loaded config from %s", config_path)

    return apply_env_overrides(config, environ=env, strict=strict)
