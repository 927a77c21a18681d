"""CLI entry point for excel2json."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table as RichTable

from excel2json import DEFAULT_ARRAY_DELIMITER, __version__
from excel2json.classifier import classify_sheet
from excel2json.io import find_workbooks, load_workbook_sheets, write_json
from excel2json.models import ConfigSheet, RunManifest, RunReport, SheetReport
from excel2json.pipeline import ConvertOptions, convert_directory
from excel2json.qc import write_run_report
from excel2json.utils import digest_files, utcnow_iso

app = typer.Typer(
    name="excel2json",
    help="excel2json — Compile spreadsheet config tables into typed JSON.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

EXIT_OK = 0
EXIT_INTERNAL = 1
EXIT_FAILURES = 2


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def _printer(quiet: bool) -> Callable[..., None]:
    return _noop if quiet else console.print


def _err(msg: str) -> None:
    console.print(f"[red]x[/red] {escape(msg)}")


# ── Helpers ──────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"excel2json v{__version__}")
        raise typer.Exit()


def _options(array_delimiter: str, strict: bool) -> ConvertOptions:
    try:
        return ConvertOptions(array_delimiter=array_delimiter, strict=strict)
    except ValueError as exc:
        _err(str(exc))
        raise typer.Exit(code=EXIT_FAILURES)


def _sheet_reporter(quiet: bool) -> Callable[[SheetReport], None]:
    echo = _printer(quiet)

    def _report(sheet: SheetReport) -> None:
        where = escape(f"{sheet.workbook}:{sheet.sheet_name}" if sheet.sheet_name else sheet.workbook)
        if sheet.status == "converted":
            echo(
                f"  [green]ok[/green] {where} -> {escape(sheet.file_name)} "
                f"({escape(sheet.class_name)}, {sheet.rows_out} rows)"
            )
        elif sheet.status == "skipped":
            echo(f"  [dim]-- {where}: not a config sheet[/dim]")
        else:
            for message in sheet.errors:
                _err(f"{where} [{sheet.status}] {message}")

    return _report


def _write_manifest(
    out_dir: Path,
    input_dir: Path,
    created_at: str,
    report: RunReport,
) -> Path:
    manifest = RunManifest(
        version=__version__,
        input_dir=str(input_dir),
        output_dir=str(out_dir),
        created_at_utc=created_at,
        status="failed" if report.has_failures else "success",
        sheets_converted=report.count("converted"),
        sheets_failed=len(report.failures),
        inputs=digest_files(find_workbooks(input_dir)),
    )
    return write_json(out_dir / "run_manifest.json", manifest.to_dict())


def _summary_table(report: RunReport) -> RichTable:
    tbl = RichTable(title="Conversion Summary", show_lines=True)
    tbl.add_column("Check", style="bold")
    tbl.add_column("Result")
    tbl.add_row("Workbooks", str(report.workbooks))
    tbl.add_row("Converted", str(report.count("converted")))
    tbl.add_row("Skipped", str(report.count("skipped")))
    failures = len(report.failures)
    if failures:
        tbl.add_row("Failed", f"[red]{failures}[/red]")
        tbl.add_row("Status", "[red]FAIL[/red]")
    else:
        tbl.add_row("Failed", "[green]0[/green]")
        tbl.add_row("Status", "[green]PASS[/green]")
    return tbl


def _exit_code(report: RunReport, strict: bool) -> int:
    if strict and report.has_failures:
        return EXIT_FAILURES
    return EXIT_OK


# ── Callbacks ────────────────────────────────────────────────────


@app.callback()
def main(
    version: bool | None = typer.Option(
        None, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """excel2json CLI."""


# ── run command ──────────────────────────────────────────────────


@app.command()
def run(
    input_dir: Path = typer.Argument(..., help="Directory containing .xlsx/.xls workbooks."),
    out_dir: Path = typer.Argument(..., help="Directory for exported JSON + reports."),
    array_delimiter: str = typer.Option(
        DEFAULT_ARRAY_DELIMITER, "--array-delimiter", "-d",
        help="Separator between elements of array-typed cells.",
    ),
    strict: bool = typer.Option(
        False, "--strict/--lenient",
        help="Exit 2 when any sheet or workbook fails (default: always exit 0).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output; errors are still printed.",
    ),
) -> None:
    """Convert every config sheet in INPUT_DIR and export JSON into OUT_DIR."""
    input_dir = input_dir.resolve()
    out_dir = out_dir.resolve()
    options = _options(array_delimiter, strict)
    echo = _printer(quiet)
    created_at = utcnow_iso()

    if not input_dir.is_dir():
        _err(f"Input directory not found: {input_dir}")
        raise typer.Exit(code=EXIT_FAILURES)

    if not quiet:
        console.print(Panel(
            f"[bold]excel2json[/bold] v{__version__}\n"
            f"Input:  {input_dir}\nOutput: {out_dir}",
            title="Conversion Start", border_style="blue",
        ))
        console.print(
            f"  Array delimiter: {array_delimiter!r}, "
            f"exit policy: {'strict' if strict else 'lenient'}"
        )

    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        report = convert_directory(input_dir, out_dir, options, notify=_sheet_reporter(quiet))
        report_path = write_run_report(out_dir, report)
        manifest_path = _write_manifest(out_dir, input_dir, created_at, report)
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=EXIT_INTERNAL)

    echo(f"  Report   -> {report_path}")
    echo(f"  Manifest -> {manifest_path}")
    if not quiet:
        console.print(_summary_table(report))
        border = "red" if report.has_failures else "green"
        console.print(Panel(
            f"{report.count('converted')} sheets converted, {len(report.failures)} failed",
            title="Conversion Complete", border_style=border,
        ))

    code = _exit_code(report, options.strict)
    if code:
        raise typer.Exit(code=code)


# ── validate command ─────────────────────────────────────────────


@app.command()
def validate(
    input_dir: Path = typer.Argument(..., help="Directory containing .xlsx/.xls workbooks."),
    array_delimiter: str = typer.Option(
        DEFAULT_ARRAY_DELIMITER, "--array-delimiter", "-d",
        help="Separator between elements of array-typed cells.",
    ),
    strict: bool = typer.Option(
        False, "--strict/--lenient",
        help="Exit 2 when any sheet or workbook fails (default: always exit 0).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Suppress informational output; errors are still printed.",
    ),
) -> None:
    """Check every config sheet in INPUT_DIR without writing anything."""
    input_dir = input_dir.resolve()
    options = _options(array_delimiter, strict)

    if not input_dir.is_dir():
        _err(f"Input directory not found: {input_dir}")
        raise typer.Exit(code=EXIT_FAILURES)

    if not quiet:
        console.print(Panel(
            f"[bold]excel2json[/bold] v{__version__}  [dim]validate mode[/dim]\n"
            f"Input: {input_dir}",
            title="Validate", border_style="cyan",
        ))

    try:
        report = convert_directory(input_dir, None, options, notify=_sheet_reporter(quiet))
    except Exception as exc:
        _err(f"Unexpected internal error: {exc}")
        raise typer.Exit(code=EXIT_INTERNAL)

    if not quiet:
        console.print(_summary_table(report))

    code = _exit_code(report, options.strict)
    if code:
        raise typer.Exit(code=code)


# ── inspect command ──────────────────────────────────────────────


@app.command()
def inspect(
    workbook: Path = typer.Argument(
        ..., help="Workbook to inspect.", exists=True, dir_okay=False, readable=True,
    ),
) -> None:
    """Print the compiled column schema of each config sheet in WORKBOOK."""
    try:
        sheets = load_workbook_sheets(workbook)
    except (FileNotFoundError, ValueError, OSError) as exc:
        _err(str(exc))
        raise typer.Exit(code=EXIT_FAILURES)

    for name, rows in sheets.items():
        outcome = classify_sheet(name, rows)
        if not isinstance(outcome, ConfigSheet):
            console.print(f"[dim]-- {escape(name)}: {escape(outcome.reason)}[/dim]")
            continue
        tbl = RichTable(
            title=f"{name} -> {outcome.metadata.file_name} ({outcome.metadata.class_name})",
            show_lines=False,
        )
        for heading in ("#", "Label", "Name", "Type", "Scope"):
            tbl.add_column(heading)
        for col in outcome.schema:
            if col.exported:
                tbl.add_row(
                    str(col.index),
                    escape(col.normal_name),
                    col.output_name,
                    col.type.expression,
                    "".join(sorted(s.value for s in col.scope)),
                )
            else:
                tbl.add_row(str(col.index), escape(col.normal_name), "[dim]-[/dim]", "", "")
        console.print(tbl)
        console.print(f"  {len(outcome.data_rows)} data rows")
