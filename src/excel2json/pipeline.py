"""Conversion pipeline — classify tabs, type their rows, export the results.

Sheet-level work is pure; :func:`convert_directory` is the only part that
touches the filesystem. Every tab yields its own independent outcome, so a
broken tab never affects the others.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from excel2json import DEFAULT_ARRAY_DELIMITER
from excel2json.classifier import classify_sheet
from excel2json.errors import CellValueError, MetadataError
from excel2json.export import write_sheet_exports
from excel2json.io import find_workbooks, load_workbook_sheets
from excel2json.models import (
    ClassificationOutcome,
    ConfigSheet,
    RawSheet,
    Rejection,
    RejectionStatus,
    RunReport,
    SheetReport,
)
from excel2json.values import type_rows


@dataclass(frozen=True)
class ConvertOptions:
    array_delimiter: str = DEFAULT_ARRAY_DELIMITER
    strict: bool = False

    def __post_init__(self) -> None:
        if not self.array_delimiter:
            raise ValueError("array_delimiter must not be empty")


@dataclass(frozen=True)
class SheetResult:
    """Classification plus typed rows for one tab."""

    outcome: ClassificationOutcome
    rows: list[dict[str, Any]] = field(default_factory=list)
    value_errors: list[CellValueError] = field(default_factory=list)

    @property
    def sheet_name(self) -> str:
        return self.outcome.sheet_name

    @property
    def status(self) -> str:
        if isinstance(self.outcome, Rejection):
            if self.outcome.status is RejectionStatus.not_config:
                return "skipped"
            return "malformed"
        if self.value_errors:
            return "invalid_values"
        return "converted"

    @property
    def messages(self) -> list[str]:
        if isinstance(self.outcome, Rejection):
            return [self.outcome.reason]
        return [str(exc) for exc in self.value_errors]

    def to_report(self, workbook: str, outputs: Sequence[Path] = ()) -> SheetReport:
        file_name = class_name = ""
        rows_in = 0
        if isinstance(self.outcome, ConfigSheet):
            file_name = self.outcome.metadata.file_name
            class_name = self.outcome.metadata.class_name
            rows_in = len(self.outcome.data_rows)
        return SheetReport(
            workbook=workbook,
            sheet_name=self.sheet_name,
            status=self.status,
            file_name=file_name,
            class_name=class_name,
            rows_in=rows_in,
            rows_out=len(self.rows) if self.status == "converted" else 0,
            errors=self.messages,
            outputs=[str(p) for p in outputs],
        )


def convert_sheet(
    name: str, rows: RawSheet, options: ConvertOptions | None = None
) -> SheetResult:
    """Classify one tab and, if it is a config sheet, type its data rows."""
    options = options or ConvertOptions()
    outcome = classify_sheet(name, rows)
    if isinstance(outcome, Rejection):
        return SheetResult(outcome=outcome)
    typed, errors = type_rows(outcome, delimiter=options.array_delimiter)
    return SheetResult(outcome=outcome, rows=typed, value_errors=errors)


def convert_workbook(path: Path, options: ConvertOptions | None = None) -> list[SheetResult]:
    """Convert every tab of one workbook, in tab order.

    Raises
    ------
    FileNotFoundError, ValueError
        If the workbook itself cannot be read.
    """
    sheets = load_workbook_sheets(path)
    return [convert_sheet(name, rows, options) for name, rows in sheets.items()]


def _reject_output_name(result: SheetResult, message: str) -> SheetResult:
    error = MetadataError(message)
    return SheetResult(
        outcome=Rejection(
            status=RejectionStatus.malformed,
            reason=str(error),
            error=error,
            sheet_name=result.sheet_name,
        )
    )


def convert_directory(
    input_dir: Path,
    output_dir: Path | None,
    options: ConvertOptions | None = None,
    *,
    notify: Callable[[SheetReport], None] | None = None,
) -> RunReport:
    """Convert every workbook in *input_dir*.

    Converted sheets are exported under *output_dir* unless it is ``None``
    (validation only). Unreadable workbooks are recorded and skipped.
    *notify* is called with each :class:`SheetReport` as it is produced.
    """
    options = options or ConvertOptions()
    workbooks = find_workbooks(input_dir)
    report = RunReport(workbooks=len(workbooks))
    claimed: dict[str, str] = {}

    def _record(sheet_report: SheetReport) -> None:
        report.sheets.append(sheet_report)
        if notify is not None:
            notify(sheet_report)

    for path in workbooks:
        try:
            results = convert_workbook(path, options)
        except (FileNotFoundError, ValueError, OSError) as exc:
            _record(SheetReport(workbook=path.name, status="unreadable", errors=[str(exc)]))
            continue

        for result in results:
            outcome = result.outcome
            if isinstance(outcome, ConfigSheet):
                file_name = outcome.metadata.file_name
                owner = f"{path.name}:{result.sheet_name}"
                if "/" in file_name or "\\" in file_name or file_name in (".", ".."):
                    result = _reject_output_name(
                        result, f"file name {file_name!r} must not contain path separators"
                    )
                elif file_name in claimed:
                    result = _reject_output_name(
                        result, f"file name {file_name!r} is already used by {claimed[file_name]}"
                    )
                else:
                    claimed[file_name] = owner

            outputs: list[Path] = []
            if (
                output_dir is not None
                and isinstance(result.outcome, ConfigSheet)
                and result.status == "converted"
            ):
                outputs = write_sheet_exports(output_dir, result.outcome, result.rows)
            _record(result.to_report(path.name, outputs))

    return report
