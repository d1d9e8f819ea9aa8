"""
LIKE wildcard escaping.

Replacements run in a fixed order: the escape character first, then
``%``, then ``_``.  Escaping the escape character first keeps the escape
characters introduced by the later passes from being doubled.

``escape_like_expression`` builds the escaping as SQL (nested
``replace()`` calls) so it applies equally to literal values and to
parameters bound at execution time.  ``escape_like`` is the same
transformation on a Python string.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import String, func, literal

from ..config import DEFAULT_LOWERING_OPTIONS, LoweringOptions

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


def like_replacements(
    options: LoweringOptions = DEFAULT_LOWERING_OPTIONS,
) -> tuple[tuple[str, str], ...]:
    """The ``(old, new)`` pairs, in the order they must be applied."""
    esc = options.escape_char
    return (
        (esc, esc + esc),
        ("%", esc + "%"),
        ("_", esc + "_"),
    )


def escape_like(value: str, options: LoweringOptions = DEFAULT_LOWERING_OPTIONS) -> str:
    for old, new in like_replacements(options):
        value = value.replace(old, new)
    return value


def escape_like_expression(
    value: ColumnElement[Any],
    options: LoweringOptions = DEFAULT_LOWERING_OPTIONS,
) -> ColumnElement[str]:
    """Wrap *value* in ``replace()`` calls mirroring :func:`escape_like`."""
    escaped: ColumnElement[Any] = value
    for old, new in like_replacements(options):
        escaped = func.replace(
            escaped, literal(old, String), literal(new, String), type_=String
        )
    return escaped


def starts_with_pattern(escaped: ColumnElement[str]) -> ColumnElement[str]:
    return escaped + literal("%", String)


def ends_with_pattern(escaped: ColumnElement[str]) -> ColumnElement[str]:
    return literal("%", String) + escaped


def contains_pattern(escaped: ColumnElement[str]) -> ColumnElement[str]:
    return literal("%", String) + escaped + literal("%", String)
