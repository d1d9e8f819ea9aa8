"""
Case-insensitive pattern primitives.

Each primitive is a two-argument SQL construct ``(source, value)`` that the
default SQL compilation does not know how to render.  They are lowered to
native PostgreSQL ``lower(...) = lower(...)`` / ``ILIKE ... ESCAPE``
fragments by :mod:`cqrs_ddd_predicates.lowering`; on any other dialect
compilation fails fast.

Usage::

    source.where(lambda u: equals_lower_case(u.first_name, "alice"))
    source.or_where(lambda u: ilike_contains(u.last_name, "il"))
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy.sql.functions import FunctionElement
from sqlalchemy.types import Boolean

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class PatternKind(str, Enum):
    EQUALS_LOWER_CASE = "equals_lower_case"
    ILIKE = "ilike"
    ILIKE_STARTS_WITH = "ilike_starts_with"
    ILIKE_ENDS_WITH = "ilike_ends_with"
    ILIKE_CONTAINS = "ilike_contains"


class PatternPrimitive(FunctionElement[bool]):
    """Base for the primitives; holds the ``(source, value)`` pair."""

    type = Boolean()
    inherit_cache = True
    kind: ClassVar[PatternKind]

    def __init__(self, source: Any, value: Any) -> None:
        super().__init__(source, value)

    @property
    def source(self) -> ColumnElement[Any]:
        return self.clauses.clauses[0]  # type: ignore[return-value]

    @property
    def value(self) -> ColumnElement[Any]:
        return self.clauses.clauses[1]  # type: ignore[return-value]


class EqualsLowerCase(PatternPrimitive):
    name = "equals_lower_case"
    kind = PatternKind.EQUALS_LOWER_CASE
    inherit_cache = True


class ILike(PatternPrimitive):
    name = "ilike"
    kind = PatternKind.ILIKE
    inherit_cache = True


class ILikeStartsWith(PatternPrimitive):
    name = "ilike_starts_with"
    kind = PatternKind.ILIKE_STARTS_WITH
    inherit_cache = True


class ILikeEndsWith(PatternPrimitive):
    name = "ilike_ends_with"
    kind = PatternKind.ILIKE_ENDS_WITH
    inherit_cache = True


class ILikeContains(PatternPrimitive):
    name = "ilike_contains"
    kind = PatternKind.ILIKE_CONTAINS
    inherit_cache = True


PATTERN_PRIMITIVES: tuple[type[PatternPrimitive], ...] = (
    EqualsLowerCase,
    ILike,
    ILikeStartsWith,
    ILikeEndsWith,
    ILikeContains,
)


def equals_lower_case(source: Any, value: Any) -> EqualsLowerCase:
    """``lower(source) = lower(value)``."""
    return EqualsLowerCase(source, value)


def ilike(source: Any, pattern: Any) -> ILike:
    """Case-insensitive LIKE; *pattern* wildcards are used as given."""
    return ILike(source, pattern)


def ilike_starts_with(source: Any, value: Any) -> ILikeStartsWith:
    return ILikeStartsWith(source, value)


def ilike_ends_with(source: Any, value: Any) -> ILikeEndsWith:
    return ILikeEndsWith(source, value)


def ilike_contains(source: Any, value: Any) -> ILikeContains:
    return ILikeContains(source, value)
