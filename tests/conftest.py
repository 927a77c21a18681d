from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook

_ITEM_SHEET: list[list[object]] = [
    ["文件名：", "Item"],
    ["类名：", "ItemConfig"],
    ["编号", "名称", "价格", "备注", "标签"],
    ["int", "string", "int", "any", "array:int"],
    ["id", "name", "price", None, "tags"],
    ["sc", "c", "s", None, "sc"],
    [1, "Sword", 100, "internal", "1,2"],
    [2, "Shield", 50, None, None],
]


@pytest.fixture
def item_sheet() -> list[list[object]]:
    """A valid config tab: five columns, one annotation-only, two data rows."""
    return [list(row) for row in _ITEM_SHEET]


@pytest.fixture
def make_workbook() -> Callable[..., Path]:
    """Return a helper that writes ``{sheet_name: rows}`` to an ``.xlsx`` file."""

    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        wb = Workbook()
        wb.remove(wb.active)
        for name, rows in sheets.items():
            ws = wb.create_sheet(name)
            for row in rows:
                ws.append(row)
        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
        return path

    return _make
