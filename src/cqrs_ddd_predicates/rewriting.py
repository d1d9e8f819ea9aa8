"""
Parameter substitution over SQLAlchemy expression trees.

Two fragments authored independently are bound to different entity
parameters (different ``aliased()`` instances of the same mapped class).
Before they can be combined into one boolean expression, every column
that belongs to the source parameter is swapped for the matching column
of the target parameter.  All other nodes are cloned unchanged, including
the arguments of pattern primitives and correlated subqueries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect as inspect_entity
from sqlalchemy.sql import visitors
from sqlalchemy.sql.elements import ColumnClause

from .exceptions import UsageContractError
from .nodes import Predicate

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.sql.selectable import FromClause

logger = logging.getLogger("cqrs_ddd.predicates.rewriting")


def _selectable_of(entity: Any) -> FromClause:
    return inspect_entity(entity).selectable


def _same_selectable(left: Any, right: Any) -> bool:
    # ORM-annotated copies hash like the element they annotate
    return left is right or (left is not None and hash(left) == hash(right))


def rebind(
    fragment: ColumnElement[bool],
    source: Any,
    target: Any,
    *,
    operation: str = "rebind",
) -> ColumnElement[bool]:
    """
    Return *fragment* with every column of *source* replaced by *target*'s.

    Args:
        fragment: Boolean expression built against *source*.
        source: Entity parameter the fragment is currently bound to.
        target: Entity parameter to bind to.  Must map the same class.
        operation: Combinator name reported on contract violations.

    Raises:
        UsageContractError: If *source* and *target* map different classes.
    """
    if source is target:
        return fragment

    source_mapper = inspect_entity(source).mapper
    target_mapper = inspect_entity(target).mapper
    if source_mapper is not target_mapper:
        raise UsageContractError(
            operation,
            f"cannot rebind a {source_mapper.class_.__name__} predicate "
            f"onto {target_mapper.class_.__name__}",
        )

    source_selectable = _selectable_of(source)
    target_selectable = _selectable_of(target)

    def replace(element: Any, **kw: Any) -> Any:
        if isinstance(element, ColumnClause) and _same_selectable(
            element.table, source_selectable
        ):
            return target_selectable.corresponding_column(element)
        return None

    logger.debug(
        "Rebinding %s fragment from %r to %r",
        source_mapper.class_.__name__,
        source_selectable,
        target_selectable,
    )
    return visitors.replacement_traverse(fragment, {}, replace)


def rebind_predicate(
    predicate: Predicate,
    target: Any,
    *,
    operation: str = "rebind",
) -> Predicate:
    """Return a copy of *predicate* bound to *target*."""
    if predicate.parameter is target:
        return predicate
    return Predicate(
        target,
        rebind(predicate.fragment, predicate.parameter, target, operation=operation),
    )
