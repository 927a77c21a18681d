"""Data models shared across the package."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from numbers import Integral
from typing import Any, Optional, Union

from excel2json.errors import SheetError

Cell = Optional[str]
RawRow = Sequence[Cell]
RawSheet = Sequence[RawRow]


def _to_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    result = int(value)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_string_list(values: Sequence[Any] | None, field_name: str) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        raise TypeError(f"{field_name} must be a sequence of strings")
    normalized: list[str] = []
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} items must be strings")
        normalized.append(item)
    return normalized


# ── Schema ───────────────────────────────────────────────────────


class ScalarType(str, Enum):
    string = "string"
    integer = "int"
    boolean = "bool"
    any = "any"


ARRAY_KEYWORD = "array"


class Scope(str, Enum):
    server = "s"
    client = "c"


@dataclass(frozen=True)
class TypeSpec:
    """Compiled column type: a scalar, optionally wrapped in an array."""

    is_array: bool = False
    element_type: ScalarType = ScalarType.any

    @classmethod
    def scalar(cls, element_type: ScalarType) -> TypeSpec:
        return cls(is_array=False, element_type=element_type)

    @classmethod
    def array_of(cls, element_type: ScalarType) -> TypeSpec:
        return cls(is_array=True, element_type=element_type)

    @property
    def expression(self) -> str:
        """Canonical type expression, e.g. ``int`` or ``array:int``."""
        if self.is_array:
            return f"{ARRAY_KEYWORD}:{self.element_type.value}"
        return self.element_type.value


@dataclass(frozen=True)
class ColumnSchema:
    """One compiled header column.

    ``output_name`` is empty and ``scope`` is empty exactly when the column
    is not exported.
    """

    index: int
    normal_name: str = ""
    exported: bool = False
    type: TypeSpec = field(default_factory=TypeSpec)
    output_name: str = ""
    scope: frozenset[Scope] = frozenset()

    @classmethod
    def unexported(cls, index: int, normal_name: str) -> ColumnSchema:
        return cls(index=index, normal_name=normal_name)

    @classmethod
    def exported_column(
        cls,
        index: int,
        normal_name: str,
        output_name: str,
        scope: frozenset[Scope],
        type_spec: TypeSpec,
    ) -> ColumnSchema:
        if not output_name or not scope:
            raise ValueError("exported columns need an output name and a scope")
        return cls(
            index=index,
            normal_name=normal_name,
            exported=True,
            type=type_spec,
            output_name=output_name,
            scope=frozenset(scope),
        )

    def visible_to(self, scope: Scope) -> bool:
        return self.exported and scope in self.scope

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "normal_name": self.normal_name,
            "exported": self.exported,
            "type": self.type.expression,
            "output_name": self.output_name,
            "scope": sorted(s.value for s in self.scope),
        }


# ── Sheets ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class SheetMetadata:
    file_name: str
    class_name: str


@dataclass(frozen=True)
class ConfigSheet:
    """A classified config sheet; built once and never mutated."""

    metadata: SheetMetadata
    schema: tuple[ColumnSchema, ...]
    data_rows: tuple[tuple[Cell, ...], ...]
    sheet_name: str = ""

    @property
    def ok(self) -> bool:
        return True

    @property
    def exported_columns(self) -> tuple[ColumnSchema, ...]:
        return tuple(col for col in self.schema if col.exported)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet_name": self.sheet_name,
            "file_name": self.metadata.file_name,
            "class_name": self.metadata.class_name,
            "schema": [col.to_dict() for col in self.schema],
            "data_rows": [list(row) for row in self.data_rows],
        }


class RejectionStatus(str, Enum):
    not_config = "not_config"
    malformed = "malformed"


@dataclass(frozen=True)
class Rejection:
    """Why a tab did not classify as a config sheet.

    ``not_config`` tabs are plain data and may be skipped quietly;
    ``malformed`` tabs were meant to be config and carry the failing error.
    """

    status: RejectionStatus
    reason: str
    error: SheetError | None = None
    sheet_name: str = ""

    @property
    def ok(self) -> bool:
        return False

    @property
    def column(self) -> int | None:
        return self.error.column if self.error is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet_name": self.sheet_name,
            "status": self.status.value,
            "reason": self.reason,
            "error": self.error.to_dict() if self.error is not None else None,
        }


ClassificationOutcome = Union[ConfigSheet, Rejection]


# ── Run reporting ────────────────────────────────────────────────


SHEET_STATUSES = ("converted", "skipped", "malformed", "invalid_values", "unreadable")


@dataclass
class SheetReport:
    """Outcome of one tab (or one unreadable workbook) in a batch run."""

    workbook: str = ""
    sheet_name: str = ""
    status: str = "skipped"
    file_name: str = ""
    class_name: str = ""
    rows_in: int = 0
    rows_out: int = 0
    errors: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.status not in SHEET_STATUSES:
            raise ValueError(f"status must be one of {', '.join(SHEET_STATUSES)}")
        self.rows_in = _to_non_negative_int(self.rows_in, "rows_in")
        self.rows_out = _to_non_negative_int(self.rows_out, "rows_out")
        self.errors = _to_string_list(self.errors, "errors")
        self.outputs = _to_string_list(self.outputs, "outputs")
        if self.rows_out > self.rows_in:
            raise ValueError("rows_out must be <= rows_in")

    @property
    def failed(self) -> bool:
        return self.status in ("malformed", "invalid_values", "unreadable")

    def to_dict(self) -> dict[str, Any]:
        return {
            "workbook": self.workbook,
            "sheet_name": self.sheet_name,
            "status": self.status,
            "file_name": self.file_name,
            "class_name": self.class_name,
            "rows_in": self.rows_in,
            "rows_out": self.rows_out,
            "errors": list(self.errors),
            "outputs": list(self.outputs),
        }


@dataclass
class RunReport:
    """Aggregated outcome of a batch run, written as ``conversion_report.json``."""

    workbooks: int = 0
    sheets: list[SheetReport] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.workbooks = _to_non_negative_int(self.workbooks, "workbooks")

    def count(self, status: str) -> int:
        return sum(1 for sheet in self.sheets if sheet.status == status)

    @property
    def failures(self) -> list[SheetReport]:
        return [sheet for sheet in self.sheets if sheet.failed]

    @property
    def has_failures(self) -> bool:
        return any(sheet.failed for sheet in self.sheets)

    def to_dict(self) -> dict[str, Any]:
        return {
            "workbooks": self.workbooks,
            "converted": self.count("converted"),
            "skipped": self.count("skipped"),
            "failed": len(self.failures),
            "sheets": [sheet.to_dict() for sheet in self.sheets],
        }


@dataclass
class RunManifest:
    """Audit-trail manifest for a single batch run."""

    tool: str = "excel2json"
    version: str = ""
    input_dir: str = ""
    output_dir: str = ""
    created_at_utc: str = ""
    status: str = "success"
    sheets_converted: int = 0
    sheets_failed: int = 0
    inputs: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.sheets_converted = _to_non_negative_int(self.sheets_converted, "sheets_converted")
        self.sheets_failed = _to_non_negative_int(self.sheets_failed, "sheets_failed")

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "version": self.version,
            "input_dir": self.input_dir,
            "output_dir": self.output_dir,
            "created_at_utc": self.created_at_utc,
            "status": self.status,
            "sheets_converted": self.sheets_converted,
            "sheets_failed": self.sheets_failed,
            "inputs": dict(self.inputs),
        }
