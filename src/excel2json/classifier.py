"""Sheet classifier — decide whether a raw tab is a config sheet."""

from __future__ import annotations

import re
from collections.abc import Sequence

from excel2json import CLASS_NAME_LABEL, FILE_NAME_LABEL, HEADER_ROW_COUNT
from excel2json.errors import MetadataError, SheetError
from excel2json.grammar import is_valid_name
from excel2json.header import compile_header
from excel2json.models import (
    ClassificationOutcome,
    ConfigSheet,
    RawSheet,
    Rejection,
    RejectionStatus,
    SheetMetadata,
)

_WHITESPACE_RE = re.compile(r"\s+")


def _text(cell: object) -> str:
    return "" if cell is None else str(cell)


def _marker_row(row: object, line: int, label: str) -> str:
    """Validate a ``<label>, <value>`` row and return the trimmed value."""
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
        raise MetadataError(f"row {line} is not a sequence: {row!r}")
    if len(row) < 2:
        raise MetadataError(f"row {line} has {len(row)} cells, expected at least 2")
    if _WHITESPACE_RE.sub("", _text(row[0])) != label:
        raise MetadataError(f"row {line} does not start with {label!r}")
    return _text(row[1]).strip()


def read_metadata(rows: RawSheet) -> SheetMetadata:
    """Extract the file-name and class-name markers from the first two rows."""
    file_name = _marker_row(rows[0], 0, FILE_NAME_LABEL)
    if not file_name:
        raise MetadataError("row 0 has an empty file name")
    class_name = _marker_row(rows[1], 1, CLASS_NAME_LABEL)
    if not is_valid_name(class_name):
        raise MetadataError(f"row 1 has an invalid class name: {class_name!r}")
    return SheetMetadata(file_name=file_name, class_name=class_name)


def classify_sheet(name: str, rows: RawSheet) -> ClassificationOutcome:
    """Classify one named tab.

    Never raises for content problems: a tab with fewer than six rows is
    ``not_config``; a tab with broken markers or headers is ``malformed``
    and carries the :class:`SheetError` that failed.
    """
    if len(rows) < HEADER_ROW_COUNT:
        return Rejection(
            status=RejectionStatus.not_config,
            reason=f"not a config sheet: {len(rows)} rows, need at least {HEADER_ROW_COUNT}",
            sheet_name=name,
        )

    try:
        metadata = read_metadata(rows)
        schema = compile_header(rows[2], rows[3], rows[4], rows[5])
    except SheetError as exc:
        return Rejection(
            status=RejectionStatus.malformed,
            reason=str(exc),
            error=exc,
            sheet_name=name,
        )

    return ConfigSheet(
        metadata=metadata,
        schema=schema,
        data_rows=tuple(tuple(row) for row in rows[HEADER_ROW_COUNT:]),
        sheet_name=name,
    )
