"""Core shared runtime utilities."""

from core.structured_logging import (
    configure_structured_logging,
    file_scope,
    get_run_id,
    phase_scope,
    set_run_id,
)
from core.run_config import (
    ConfigValidationError,
    RunConfig,
    apply_env_overrides,
    load_config_payload,
    load_run_config,
    parse_run_config,
    resolve_strict_config_validation,
)
from core.run_artifacts import build_run_report, write_run_report

__all__ = [
    "configure_structured_logging",
    "file_scope",
    "get_run_id",
    "phase_scope",
    "set_run_id",
    "ConfigValidationError",
    "RunConfig",
    "apply_env_overrides",
    "load_config_payload",
    "load_run_config",
    "parse_run_config",
    "resolve_strict_config_validation",
    "build_run_report",
    "write_run_report",
]
