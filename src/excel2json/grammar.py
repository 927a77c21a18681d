"""Type-expression grammar plus identifier and scope validators."""

from __future__ import annotations

import re

from excel2json.errors import ScopeError, TypeExpressionError
from excel2json.models import ARRAY_KEYWORD, ScalarType, Scope, TypeSpec

_NAME_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]{0,200}$")

SCALAR_NAMES: tuple[str, ...] = tuple(t.value for t in ScalarType)
SCOPE_FLAGS: tuple[str, ...] = tuple(s.value for s in Scope)


def is_blank(cell: object) -> bool:
    """True for ``None`` and whitespace-only text."""
    return cell is None or (isinstance(cell, str) and cell.strip() == "")


def is_valid_name(name: object) -> bool:
    """True if *name* is a usable output/class identifier."""
    return isinstance(name, str) and _NAME_RE.fullmatch(name) is not None


# ── Types ────────────────────────────────────────────────────────


def _scalar(token: str, expression: str, column: int | None) -> ScalarType:
    try:
        return ScalarType(token)
    except ValueError:
        raise TypeExpressionError(
            f"type {expression!r} uses an undefined type {token!r}; "
            f"supported types: {', '.join(SCALAR_NAMES)}",
            column=column,
        ) from None


def parse_type_expression(expression: object, *, column: int | None = None) -> TypeSpec:
    """Parse ``<scalar>`` or ``array:<scalar>`` into a :class:`TypeSpec`.

    Raises
    ------
    TypeExpressionError
        If the expression is blank, has the wrong shape, nests arrays,
        or names a type outside the closed scalar set.
    """
    if is_blank(expression):
        raise TypeExpressionError("type is empty", column=column)
    if not isinstance(expression, str):
        raise TypeExpressionError(f"type {expression!r} is not text", column=column)

    parts = [part.strip() for part in expression.split(":", 1)]
    if len(parts) == 1:
        return TypeSpec.scalar(_scalar(parts[0], expression, column))

    main, element = parts
    if main != ARRAY_KEYWORD:
        raise TypeExpressionError(
            f"type {expression!r} is not an array type but contains ':'", column=column
        )
    if element == ARRAY_KEYWORD or element.startswith(f"{ARRAY_KEYWORD}:"):
        raise TypeExpressionError(
            f"type {expression!r} nests {ARRAY_KEYWORD} inside {ARRAY_KEYWORD}", column=column
        )
    return TypeSpec.array_of(_scalar(element, expression, column))


# ── Scopes ───────────────────────────────────────────────────────


def parse_scope(cell: object, *, column: int | None = None) -> frozenset[Scope]:
    """Parse a scope cell such as ``s``, ``c`` or ``sc``.

    A blank cell yields an empty set, meaning the column is not exported.
    """
    if is_blank(cell):
        return frozenset()
    if not isinstance(cell, str):
        raise ScopeError(f"scope {cell!r} is not text", column=column)

    flags = list(cell.strip())
    if len(flags) > 2:
        raise ScopeError(f"scope {cell!r} is longer than 2 characters", column=column)
    if len(flags) == 2 and flags[0] == flags[1]:
        raise ScopeError(f"scope {cell!r} repeats the same flag", column=column)

    scope: set[Scope] = set()
    for flag in flags:
        if flag not in SCOPE_FLAGS:
            raise ScopeError(
                f"scope {cell!r} contains {flag!r}; allowed flags: {', '.join(SCOPE_FLAGS)}",
                column=column,
            )
        scope.add(Scope(flag))
    return frozenset(scope)
