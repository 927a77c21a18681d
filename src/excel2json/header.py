"""Header compiler — four parallel header rows into a column schema.

Validation runs in phases (names, then scopes, then types). Each phase scans
every column before the next starts, and the first failure aborts the whole
compilation with a column-indexed error. Blank output names or blank scopes
demote a column to "not exported" instead of failing, so authors can keep
annotation-only columns in a sheet.
"""

from __future__ import annotations

from collections.abc import Sequence

from excel2json.errors import ColumnNameError, ShapeError
from excel2json.grammar import is_blank, is_valid_name, parse_scope, parse_type_expression
from excel2json.models import Cell, ColumnSchema, Scope, TypeSpec

_ROW_KINDS = ("normal names", "types", "output names", "scopes")


def _check_shape(rows: Sequence[object]) -> int:
    for kind, row in zip(_ROW_KINDS, rows):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise ShapeError(f"{kind} row is not a sequence: {row!r}")

    lengths = [len(row) for row in rows]  # type: ignore[arg-type]
    if len(set(lengths)) != 1:
        detail = ", ".join(f"{kind}={n}" for kind, n in zip(_ROW_KINDS, lengths))
        raise ShapeError(f"header rows differ in length: {detail}")
    if lengths[0] == 0:
        raise ShapeError("header rows are empty")
    return lengths[0]


def _label(cell: Cell) -> str:
    return "" if cell is None else str(cell)


def compile_header(
    normal_names: Sequence[Cell],
    types: Sequence[Cell],
    output_names: Sequence[Cell],
    scopes: Sequence[Cell],
) -> tuple[ColumnSchema, ...]:
    """Compile the four header rows of a config sheet.

    Returns one :class:`ColumnSchema` per column, ``index`` equal to its
    position.

    Raises
    ------
    ShapeError
        If the rows are not sequences, differ in length, or are empty.
    ColumnNameError
        If an output name is not a valid identifier or repeats an earlier one.
    ScopeError
        If a non-blank scope cell is malformed.
    TypeExpressionError
        If an exported column's type expression is invalid.
    """
    length = _check_shape((normal_names, types, output_names, scopes))

    exported = [True] * length
    names = [""] * length
    seen: set[str] = set()
    for i in range(length):
        cell = output_names[i]
        if is_blank(cell):
            exported[i] = False
            continue
        name = str(cell).strip()
        if not is_valid_name(name):
            raise ColumnNameError(f"output name {name!r} is not a valid name", column=i)
        if name in seen:
            raise ColumnNameError(f"output name {name!r} is duplicated", column=i)
        seen.add(name)
        names[i] = name

    col_scopes: list[frozenset[Scope]] = [frozenset()] * length
    for i in range(length):
        if not exported[i]:
            continue
        scope = parse_scope(scopes[i], column=i)
        if not scope:
            exported[i] = False
            continue
        col_scopes[i] = scope

    col_types = [TypeSpec()] * length
    for i in range(length):
        if exported[i]:
            col_types[i] = parse_type_expression(types[i], column=i)

    schema: list[ColumnSchema] = []
    for i in range(length):
        normal_name = _label(normal_names[i])
        if exported[i]:
            schema.append(
                ColumnSchema.exported_column(i, normal_name, names[i], col_scopes[i], col_types[i])
            )
        else:
            schema.append(ColumnSchema.unexported(i, normal_name))
    return tuple(schema)
