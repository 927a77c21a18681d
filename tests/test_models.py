from __future__ import annotations

import pytest

from excel2json.errors import MetadataError
from excel2json.models import (
    ColumnSchema,
    RunManifest,
    RunReport,
    ScalarType,
    Scope,
    SheetReport,
    TypeSpec,
)


def test_type_spec_expression() -> None:
    assert TypeSpec().expression == "any"
    assert TypeSpec.scalar(ScalarType.boolean).expression == "bool"
    assert TypeSpec.array_of(ScalarType.string).expression == "array:string"


def test_exported_column_requires_name_and_scope() -> None:
    with pytest.raises(ValueError, match="output name"):
        ColumnSchema.exported_column(0, "a", "", frozenset({Scope.server}), TypeSpec())
    with pytest.raises(ValueError, match="scope"):
        ColumnSchema.exported_column(0, "a", "a", frozenset(), TypeSpec())


def test_column_to_dict_and_visibility() -> None:
    col = ColumnSchema.exported_column(
        2, "编号", "id", frozenset({Scope.client}), TypeSpec.scalar(ScalarType.integer)
    )

    assert col.visible_to(Scope.client)
    assert not col.visible_to(Scope.server)
    assert col.to_dict() == {
        "index": 2,
        "normal_name": "编号",
        "exported": True,
        "type": "int",
        "output_name": "id",
        "scope": ["c"],
    }


def test_unexported_column_is_never_visible() -> None:
    col = ColumnSchema.unexported(0, "备注")
    assert not col.exported
    assert not col.visible_to(Scope.server)
    assert col.output_name == ""


def test_sheet_report_validates_status_and_counts() -> None:
    with pytest.raises(ValueError, match="status"):
        SheetReport(status="exploded")
    with pytest.raises(ValueError, match="rows_out"):
        SheetReport(status="converted", rows_in=1, rows_out=2)
    with pytest.raises(TypeError, match="rows_in"):
        SheetReport(rows_in=True)  # type: ignore[arg-type]
    with pytest.raises(TypeError, match="errors"):
        SheetReport(errors="boom")  # type: ignore[arg-type]


def test_sheet_report_accepts_none_for_list_fields() -> None:
    report = SheetReport(errors=None, outputs=None)  # type: ignore[arg-type]
    assert report.errors == []
    assert report.outputs == []


def test_run_report_counts_and_failures() -> None:
    report = RunReport(
        workbooks=2,
        sheets=[
            SheetReport(status="converted", rows_in=3, rows_out=3),
            SheetReport(status="skipped"),
            SheetReport(status="malformed", errors=["bad"]),
            SheetReport(status="unreadable", errors=["corrupt"]),
        ],
    )

    assert report.count("converted") == 1
    assert report.has_failures
    payload = report.to_dict()
    assert payload["converted"] == 1
    assert payload["skipped"] == 1
    assert payload["failed"] == 2
    assert len(payload["sheets"]) == 4


def test_run_report_to_dict_returns_copies() -> None:
    sheet = SheetReport(status="malformed", errors=["bad"])
    payload = RunReport(sheets=[sheet]).to_dict()
    payload["sheets"][0]["errors"].append("other")
    assert sheet.errors == ["bad"]


def test_run_manifest_rejects_negative_counts() -> None:
    with pytest.raises(ValueError, match="sheets_failed"):
        RunManifest(sheets_failed=-1)


def test_sheet_error_to_dict() -> None:
    error = MetadataError("row 0 has an empty file name")
    assert str(error) == "row 0 has an empty file name"
    assert error.to_dict() == {
        "kind": "metadata",
        "message": "row 0 has an empty file name",
        "column": None,
        "row": None,
    }
