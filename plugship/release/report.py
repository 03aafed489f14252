# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Build report: a JSON summary of a successful run, for CI to pick up.

Format (keys sorted, 2-space indent):

    {
      "artifact": {"exists": true, "path": "...", "sha256": "...", ...} | null,
      "dry_run": false,
      "stages": [{"arguments": [...], "exit_code": 0, "stage_name": "restore"}, ...],
      "version": "1.2.3" | null
    }
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path

from plugship.logging.logger import get_logger
from plugship.pipeline.orchestrator import PipelineResult
from plugship.utils.filesystem import atomic_write

_logger: logging.Logger = get_logger(__name__)


def report_to_dict(result: PipelineResult) -> dict[str, object]:
    """Plain-dict form of a pipeline result."""
    return asdict(result)


def write_build_report(result: PipelineResult, output_path: Path) -> Path:
    """
    Serialize a pipeline result to JSON, atomically.

    Returns:
        The path written.
    """
    content = json.dumps(report_to_dict(result), indent=2, sort_keys=True) + "\n"
    atomic_write(output_path, content)
    _logger.info("Build report written", extra={"path": str(output_path)})
    return output_path
