"""Per-scope JSON export of converted config sheets."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from excel2json.io import write_json
from excel2json.models import ColumnSchema, ConfigSheet, Scope

SCOPE_DIRS: dict[Scope, str] = {
    Scope.server: "svr",
    Scope.client: "client",
}


def scope_document(
    sheet: ConfigSheet, rows: Sequence[dict[str, Any]], scope: Scope
) -> dict[str, Any] | None:
    """Build the export document for *scope*, or ``None`` if no column is visible."""
    columns: list[ColumnSchema] = [col for col in sheet.schema if col.visible_to(scope)]
    if not columns:
        return None
    return {
        "fileName": sheet.metadata.file_name,
        "className": sheet.metadata.class_name,
        "sheetName": sheet.sheet_name,
        "columns": [
            {"name": col.output_name, "type": col.type.expression, "label": col.normal_name}
            for col in columns
        ],
        "rows": [{col.output_name: row[col.output_name] for col in columns} for row in rows],
    }


def write_sheet_exports(
    out_dir: Path, sheet: ConfigSheet, rows: Sequence[dict[str, Any]]
) -> list[Path]:
    """Write ``svr/<file>.json`` and ``client/<file>.json`` and return their paths."""
    written: list[Path] = []
    for scope, subdir in SCOPE_DIRS.items():
        document = scope_document(sheet, rows, scope)
        if document is None:
            continue
        path = Path(out_dir) / subdir / f"{sheet.metadata.file_name}.json"
        written.append(write_json(path, document))
    return written
