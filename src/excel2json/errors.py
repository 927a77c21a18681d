"""Structured errors raised while compiling config sheets.

Every error carries its :class:`ErrorKind` plus, where one applies, the
0-based column index (and data-row index for cell values) that failed.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    shape = "shape"
    metadata = "metadata"
    column_name = "name"
    scope = "scope"
    column_type = "type"
    cell_value = "value"


class SheetError(Exception):
    """Base class for every config-sheet validation failure."""

    kind: ErrorKind = ErrorKind.shape

    def __init__(self, message: str, *, column: int | None = None, row: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.column = column
        self.row = row

    def __str__(self) -> str:
        location = []
        if self.row is not None:
            location.append(f"row {self.row}")
        if self.column is not None:
            location.append(f"column {self.column}")
        if not location:
            return self.message
        return f"{', '.join(location)}: {self.message}"

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "column": self.column,
            "row": self.row,
        }


class ShapeError(SheetError):
    kind = ErrorKind.shape


class MetadataError(SheetError):
    kind = ErrorKind.metadata


class ColumnNameError(SheetError):
    kind = ErrorKind.column_name


class ScopeError(SheetError):
    kind = ErrorKind.scope


class TypeExpressionError(SheetError):
    kind = ErrorKind.column_type


class CellValueError(SheetError, ValueError):
    kind = ErrorKind.cell_value
