"""Run report persistence."""

from __future__ import annotations

from pathlib import Path

from excel2json.io import write_json
from excel2json.models import RunReport

REPORT_NAME = "conversion_report.json"


def write_run_report(out_dir: Path, report: RunReport) -> Path:
    """Write ``conversion_report.json`` into *out_dir* and return the path."""
    return write_json(out_dir / REPORT_NAME, report.to_dict())
