"""
JSON serialization of the extracted model.

The output shape is what the diagram viewer reads: ``{"classes": [...],
"interfaces": [...]}`` with ``summary``, ``extends`` and ``implements``
always present and set to null when absent.
"""

import json
import logging
import os
from typing import Any, Dict

from extraction.models import ExtractionResult

logger = logging.getLogger(__name__)


def to_wire_dict(result: ExtractionResult) -> Dict[str, Any]:
    """Convert a result into plain JSON-ready dictionaries and lists."""
    return result.to_dict()


def to_json(result: ExtractionResult, indent: int = 2) -> str:
    """Encode a result as JSON text. Non-ASCII identifiers are kept as-is."""
    return json.dumps(to_wire_dict(result), indent=indent, ensure_ascii=False)


def write_json(result: ExtractionResult, output_path: str, indent: int = 2) -> str:
    """Write a result to ``output_path`` and return the absolute path.

    Parent directories are created as needed.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path = os.path.abspath(output_path)
    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(to_json(result, indent=indent))
        f.write("\n")
    logger.info("Output written to: %s", output_path)
    return output_path
