"""
Conditional filtering.

``where_if`` / ``or_where_if`` apply their predicate only when the
condition holds and otherwise return the very same source object.  The
``*_if_not_empty`` / ``*_if_not_blank`` variants derive the condition from
an optional filter value::

    source = (
        QuerySource(User)
        .where_if_not_empty(form.first_name, lambda u: u.first_name == form.first_name)
        .where_if_not_empty(form.last_name, lambda u: u.last_name == form.last_name)
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from .combinators import or_where, where

if TYPE_CHECKING:
    from .combinators import PredicateLike
    from .query import QuerySource

NIL_UUID = UUID(int=0)


def is_not_empty(value: str | UUID | None) -> bool:
    """``False`` for ``None``, ``""`` and the nil UUID."""
    if value is None:
        return False
    if isinstance(value, UUID):
        return value != NIL_UUID
    return value != ""


def is_not_blank(value: str | None) -> bool:
    """``False`` for ``None``, ``""`` and whitespace-only strings."""
    return value is not None and value.strip() != ""


def where_if(
    source: QuerySource[Any],
    condition: bool,
    predicate: PredicateLike,
) -> QuerySource[Any]:
    return where(source, predicate) if condition else source


def or_where_if(
    source: QuerySource[Any],
    condition: bool,
    predicate: PredicateLike,
) -> QuerySource[Any]:
    return or_where(source, predicate) if condition else source


def where_if_not_empty(
    source: QuerySource[Any],
    value: str | UUID | None,
    predicate: PredicateLike,
) -> QuerySource[Any]:
    return where_if(source, is_not_empty(value), predicate)


def where_if_not_blank(
    source: QuerySource[Any],
    value: str | None,
    predicate: PredicateLike,
) -> QuerySource[Any]:
    return where_if(source, is_not_blank(value), predicate)


def or_where_if_not_empty(
    source: QuerySource[Any],
    value: str | UUID | None,
    predicate: PredicateLike,
) -> QuerySource[Any]:
    return or_where_if(source, is_not_empty(value), predicate)


def or_where_if_not_blank(
    source: QuerySource[Any],
    value: str | None,
    predicate: PredicateLike,
) -> QuerySource[Any]:
    return or_where_if(source, is_not_blank(value), predicate)
