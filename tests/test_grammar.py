from __future__ import annotations

import pytest

from excel2json.errors import ErrorKind, ScopeError, TypeExpressionError
from excel2json.grammar import is_blank, is_valid_name, parse_scope, parse_type_expression
from excel2json.models import ScalarType, Scope, TypeSpec


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("int", TypeSpec.scalar(ScalarType.integer)),
        ("string", TypeSpec.scalar(ScalarType.string)),
        ("bool", TypeSpec.scalar(ScalarType.boolean)),
        ("any", TypeSpec.scalar(ScalarType.any)),
        ("array:int", TypeSpec.array_of(ScalarType.integer)),
        (" array : string ", TypeSpec.array_of(ScalarType.string)),
    ],
)
def test_parse_type_expression_accepts_grammar(expression: str, expected: TypeSpec) -> None:
    assert parse_type_expression(expression) == expected


@pytest.mark.parametrize(
    "expression",
    ["float", "array", "array:array", "array:array:int", "int:array", "list:int", "array:", ""],
)
def test_parse_type_expression_rejects_invalid(expression: str) -> None:
    with pytest.raises(TypeExpressionError) as info:
        parse_type_expression(expression, column=3)

    assert info.value.column == 3
    assert info.value.kind is ErrorKind.column_type


def test_parse_type_expression_rejects_none() -> None:
    with pytest.raises(TypeExpressionError, match="empty"):
        parse_type_expression(None)


def test_undefined_type_message_lists_supported_types() -> None:
    with pytest.raises(TypeExpressionError, match="string, int, bool, any"):
        parse_type_expression("float")


def test_type_expression_round_trips_grammar_class() -> None:
    for expression in ("int", "array:bool", "any", "array:any"):
        assert parse_type_expression(expression).expression == expression


@pytest.mark.parametrize("name", ["id", "_x", "$ref", "Item2", "a" * 201])
def test_valid_names(name: str) -> None:
    assert is_valid_name(name)


@pytest.mark.parametrize("name", ["", "1bad", "with space", "dash-name", "a" * 202, None, 5])
def test_invalid_names(name: object) -> None:
    assert not is_valid_name(name)


def test_parse_scope_accepts_each_flag_combination() -> None:
    assert parse_scope("s") == frozenset({Scope.server})
    assert parse_scope("c") == frozenset({Scope.client})
    assert parse_scope("sc") == frozenset({Scope.server, Scope.client})
    assert parse_scope(" cs ") == frozenset({Scope.server, Scope.client})


@pytest.mark.parametrize("cell", [None, "", "   "])
def test_parse_scope_blank_means_not_exported(cell: object) -> None:
    assert parse_scope(cell) == frozenset()


def test_parse_scope_rejects_repeated_flag() -> None:
    with pytest.raises(ScopeError, match="repeats") as info:
        parse_scope("ss", column=1)
    assert info.value.column == 1


def test_parse_scope_rejects_long_values() -> None:
    with pytest.raises(ScopeError, match="longer than 2"):
        parse_scope("scs")


def test_parse_scope_rejects_unknown_flag_and_names_allowed_set() -> None:
    with pytest.raises(ScopeError, match="'x'.*s, c"):
        parse_scope("sx")


def test_is_blank() -> None:
    assert is_blank(None)
    assert is_blank(" \t")
    assert not is_blank("x")
