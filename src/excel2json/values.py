"""Value typer — raw cell text into canonical typed values."""

from __future__ import annotations

import re
from typing import Any

from excel2json import DEFAULT_ARRAY_DELIMITER, HEADER_ROW_COUNT
from excel2json.errors import CellValueError
from excel2json.grammar import is_blank
from excel2json.models import Cell, ConfigSheet, ScalarType, TypeSpec

_INTEGER_RE = re.compile(r"^[+-]?\d{1,17}$")


def _to_bool(cell: Cell) -> bool:
    if cell is None:
        return False
    return cell.strip().lower() == "true"


def _to_int(cell: Cell, column: int | None, row: int | None) -> int:
    text = "" if cell is None else cell.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise CellValueError(f"{cell!r} is not an integer", column=column, row=row)
    return int(text)


def convert_scalar(
    element_type: ScalarType,
    cell: Cell,
    *,
    column: int | None = None,
    row: int | None = None,
) -> Any:
    """Convert one cell (or array element) to *element_type*.

    ``bool`` never fails: anything but ``true`` (any case) is ``False``.
    ``any`` passes the raw text through untouched.
    """
    if element_type is ScalarType.boolean:
        return _to_bool(cell)
    if element_type is ScalarType.integer:
        return _to_int(cell, column, row)
    if element_type is ScalarType.string:
        return "" if cell is None else cell.strip()
    return cell


def split_array(cell: Cell, delimiter: str = DEFAULT_ARRAY_DELIMITER) -> list[str]:
    """Split an array cell into stripped element tokens; blank gives ``[]``."""
    if not delimiter:
        raise ValueError("array delimiter must not be empty")
    if is_blank(cell):
        return []
    return [token.strip() for token in str(cell).split(delimiter)]


def convert_value(
    type_spec: TypeSpec,
    cell: Cell,
    *,
    delimiter: str = DEFAULT_ARRAY_DELIMITER,
    column: int | None = None,
    row: int | None = None,
) -> Any:
    """Convert a raw cell according to a compiled column type.

    Raises
    ------
    CellValueError
        If the cell (or any array element) does not satisfy the type.
    """
    if not type_spec.is_array:
        return convert_scalar(type_spec.element_type, cell, column=column, row=row)
    return [
        convert_scalar(type_spec.element_type, token, column=column, row=row)
        for token in split_array(cell, delimiter)
    ]


def type_rows(
    sheet: ConfigSheet, *, delimiter: str = DEFAULT_ARRAY_DELIMITER
) -> tuple[list[dict[str, Any]], list[CellValueError]]:
    """Type every non-blank data row of *sheet*.

    Errors are collected instead of raised, so one bad cell does not hide
    the others. Row indices in errors are 0-based sheet rows, so the first
    data row is row 6. Short rows are padded with blank cells.
    """
    rows: list[dict[str, Any]] = []
    errors: list[CellValueError] = []
    for r, raw in enumerate(sheet.data_rows, start=HEADER_ROW_COUNT):
        if all(is_blank(cell) for cell in raw):
            continue
        row_errors: list[CellValueError] = []
        typed: dict[str, Any] = {}
        for col in sheet.exported_columns:
            cell = raw[col.index] if col.index < len(raw) else None
            try:
                typed[col.output_name] = convert_value(
                    col.type, cell, delimiter=delimiter, column=col.index, row=r
                )
            except CellValueError as exc:
                row_errors.append(exc)
        if row_errors:
            errors.extend(row_errors)
        else:
            rows.append(typed)
    return rows, errors
