from __future__ import annotations

from excel2json.classifier import classify_sheet
from excel2json.errors import ColumnNameError, MetadataError, ShapeError
from excel2json.models import (
    ConfigSheet,
    Rejection,
    RejectionStatus,
    ScalarType,
    Scope,
    TypeSpec,
)


def _rows(**overrides: list) -> list[list]:  # type: ignore[type-arg]
    rows = [
        ["文件名：", "Item"],
        ["类名：", "ItemConfig"],
        ["编号"],
        ["int"],
        ["id"],
        ["sc"],
        ["7"],
    ]
    for key, value in overrides.items():
        rows[int(key.lstrip("r"))] = value
    return rows


def test_end_to_end_item_sheet() -> None:
    outcome = classify_sheet("Items", _rows())

    assert isinstance(outcome, ConfigSheet)
    assert outcome.ok
    assert outcome.sheet_name == "Items"
    assert outcome.metadata.file_name == "Item"
    assert outcome.metadata.class_name == "ItemConfig"
    assert len(outcome.schema) == 1
    col = outcome.schema[0]
    assert col.output_name == "id"
    assert col.type == TypeSpec(is_array=False, element_type=ScalarType.integer)
    assert col.scope == frozenset({Scope.server, Scope.client})
    assert outcome.data_rows == (("7",),)


def test_five_rows_is_not_a_config_and_not_an_error() -> None:
    outcome = classify_sheet("Notes", _rows()[:5])

    assert isinstance(outcome, Rejection)
    assert not outcome.ok
    assert outcome.status is RejectionStatus.not_config
    assert outcome.error is None


def test_exactly_six_rows_has_no_data() -> None:
    outcome = classify_sheet("Items", _rows()[:6])
    assert isinstance(outcome, ConfigSheet)
    assert outcome.data_rows == ()


def test_invalid_class_marker_is_malformed_metadata() -> None:
    outcome = classify_sheet("Items", _rows(r1=["类名", "1bad"]))

    assert isinstance(outcome, Rejection)
    assert outcome.status is RejectionStatus.malformed
    assert isinstance(outcome.error, MetadataError)


def test_invalid_class_name_is_malformed_metadata() -> None:
    outcome = classify_sheet("Items", _rows(r1=["类名：", "1bad"]))

    assert isinstance(outcome, Rejection)
    assert isinstance(outcome.error, MetadataError)
    assert "1bad" in outcome.reason


def test_marker_whitespace_is_ignored_and_values_trimmed() -> None:
    outcome = classify_sheet(
        "Items", _rows(r0=[" 文件 名： ", "  Item  "], r1=["类名：\n", " ItemConfig "])
    )

    assert isinstance(outcome, ConfigSheet)
    assert outcome.metadata.file_name == "Item"
    assert outcome.metadata.class_name == "ItemConfig"


def test_missing_file_name_is_malformed() -> None:
    for row in (["文件名：", "   "], ["文件名："], ["File:", "Item"], ["文件名：", None]):
        outcome = classify_sheet("Items", _rows(r0=row))
        assert isinstance(outcome, Rejection)
        assert outcome.status is RejectionStatus.malformed
        assert isinstance(outcome.error, MetadataError)


def test_non_sequence_marker_row_is_malformed() -> None:
    rows: list = _rows()  # type: ignore[type-arg]
    rows[0] = None
    outcome = classify_sheet("Items", rows)
    assert isinstance(outcome, Rejection)
    assert isinstance(outcome.error, MetadataError)


def test_header_failure_carries_column_index() -> None:
    rows = _rows(r2=["a", "b"], r3=["int", "int"], r4=["id", "id"], r5=["s", "s"])
    outcome = classify_sheet("Items", rows)

    assert isinstance(outcome, Rejection)
    assert outcome.status is RejectionStatus.malformed
    assert isinstance(outcome.error, ColumnNameError)
    assert outcome.column == 1
    assert "column 1" in outcome.reason


def test_mismatched_header_lengths_are_shape_errors() -> None:
    outcome = classify_sheet("Items", _rows(r3=["int", "string"]))
    assert isinstance(outcome, Rejection)
    assert isinstance(outcome.error, ShapeError)


def test_input_rows_are_not_mutated() -> None:
    rows = _rows()
    snapshot = [list(r) for r in rows]
    classify_sheet("Items", rows)
    assert rows == snapshot


def test_rejection_to_dict() -> None:
    outcome = classify_sheet("Items", _rows(r5=["x"]))
    assert isinstance(outcome, Rejection)
    payload = outcome.to_dict()
    assert payload["status"] == "malformed"
    assert payload["error"]["kind"] == "scope"
    assert payload["error"]["column"] == 0


def test_config_sheet_to_dict() -> None:
    outcome = classify_sheet("Items", _rows())
    assert isinstance(outcome, ConfigSheet)
    payload = outcome.to_dict()
    assert payload["file_name"] == "Item"
    assert payload["schema"][0]["scope"] == ["c", "s"]
    assert payload["data_rows"] == [["7"]]
