"""Python-side evaluation of the escaping and pattern expression trees."""

from __future__ import annotations

from typing import Any

from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import (
    BinaryExpression,
    BindParameter,
    ExpressionClauseList,
    Grouping,
)
from sqlalchemy.sql.functions import Function


def evaluate(expr: Any) -> str:
    """Evaluate a tree of ``replace()`` calls, concatenations and literals."""
    if isinstance(expr, Grouping):
        return evaluate(expr.element)
    if isinstance(expr, BindParameter):
        return expr.value
    if isinstance(expr, Function) and expr.name == "replace":
        text, old, new = (evaluate(c) for c in expr.clauses.clauses)
        return text.replace(old, new)
    if isinstance(expr, BinaryExpression) and expr.operator is operators.concat_op:
        return evaluate(expr.left) + evaluate(expr.right)
    # a + b + c is flattened into a single clause list
    if (
        isinstance(expr, ExpressionClauseList)
        and expr.operator is operators.concat_op
    ):
        return "".join(evaluate(c) for c in expr.clauses)
    raise AssertionError(f"unexpected node {expr!r}")
