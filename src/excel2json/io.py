"""I/O helpers — discover workbooks, read raw tabs, write JSON artifacts."""

from __future__ import annotations

import json
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, cast

import pandas as pd
import xlrd
from xlrd.compdoc import CompDocError

from excel2json.models import Cell

WORKBOOK_SUFFIXES = (".xlsx", ".xls")

# ── Loading ──────────────────────────────────────────────────────


def find_workbooks(directory: Path) -> list[Path]:
    """Return the ``.xlsx``/``.xls`` files directly inside *directory*, sorted.

    Office lock files (``~$name.xlsx``) are ignored.

    Raises
    ------
    FileNotFoundError
        If *directory* does not exist or is not a directory.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file()
        and path.suffix.lower() in WORKBOOK_SUFFIXES
        and not path.name.startswith("~$")
    )


def _cell(value: Any) -> Cell:
    if value is None or pd.isna(value):
        return None
    return str(value)


def frame_to_rows(df: pd.DataFrame) -> list[list[Cell]]:
    """Convert a header-less DataFrame into a raw row matrix (blank -> ``None``)."""
    return [[_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]


def load_workbook_sheets(path: Path) -> dict[str, list[list[Cell]]]:
    """Read every tab of a workbook as raw text rows, keyed by tab name.

    Only empty cells become ``None``; text such as ``NA`` or ``null`` is kept.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the extension is not supported or the workbook cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        engine = "openpyxl"
    elif suffix == ".xls":
        engine = "xlrd"
    else:
        raise ValueError(f"Unsupported file type: {suffix!r}. Use .xlsx or .xls")

    read_excel = cast(Callable[..., dict[str, pd.DataFrame]], getattr(pd, "read_excel"))
    try:
        frames = read_excel(
            path,
            sheet_name=None,
            header=None,
            dtype="string",
            engine=engine,
            keep_default_na=False,
            na_values=[""],
        )
    except ImportError as exc:
        raise ValueError(
            f"Reading {suffix} files needs the {engine!r} package: pip install {engine}"
        ) from exc
    except (
        OSError,
        KeyError,
        ValueError,
        zipfile.BadZipFile,
        xlrd.XLRDError,
        CompDocError,
    ) as exc:
        raise ValueError(f"Could not read workbook {path}: {exc}") from exc

    return {str(name): frame_to_rows(df) for name, df in frames.items()}


# ── Writing ──────────────────────────────────────────────────────


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    item = getattr(obj, "item", None)
    if callable(item):
        converted = item()
        if isinstance(converted, (str, int, float, bool)) or converted is None:
            return converted
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as pretty-printed JSON to *path* (atomic + deterministic)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=True,
        ensure_ascii=False,
        default=_json_default,
    ) + "\n"
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(path)
    return path
