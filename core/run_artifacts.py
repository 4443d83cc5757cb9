"""Run artifact helpers for operational reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Optional

DEFAULT_REPORT_DIR = "output/run_reports"


def build_run_report(
    stats: Any,
    input_path: str,
    output_path: Optional[str],
    status: str,
) -> dict[str, Any]:
    """Assemble the report payload for one extraction run.

    ``stats`` is anything exposing ``to_dict()``, normally an
    ``ExtractionStats``.
    """
    return {
        "status": status,
        "input": os.path.abspath(input_path),
        "output": os.path.abspath(output_path) if output_path else "<stdout>",
        "stats": stats.to_dict() if stats is not None else {},
    }


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = DEFAULT_REPORT_DIR,
) -> str:
    """Write a JSON run report and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
