"""
Predicate combinators.

Each function takes a :class:`~cqrs_ddd_predicates.query.QuerySource`,
inspects the outermost links of its filter chain and returns a new
source; the input is never modified.

Example::

    source = (
        QuerySource(User)
        .or_where(lambda u: u.first_name == "Alice")
        .or_where(lambda u: u.first_name == "Bob")
        .and_()
        .or_where(lambda u: u.last_name == "Smith")
        .or_where(lambda u: u.last_name == "Taylor")
    )
    # WHERE (first_name = 'Alice' OR first_name = 'Bob')
    #   AND (last_name = 'Smith' OR last_name = 'Taylor')

    source = (
        QuerySource(User)
        .begin_group()
        .where(lambda u: u.first_name == "Quinn")
        .where(lambda u: u.last_name == "White")
        .end_group()
        .or_where(lambda u: u.first_name == "Alice")
    )
    # WHERE (first_name = 'Quinn' AND last_name = 'White') OR first_name = 'Alice'

Groups are single level: ``end_group`` closes the most recent
``begin_group``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_ as sql_and
from sqlalchemy import or_ as sql_or

from .exceptions import UnmatchedGroupError, UsageContractError
from .nodes import (
    AndBoundary,
    FilterStep,
    GroupMarker,
    Predicate,
    as_filter_step,
    entity_mapper,
    fresh_parameter,
)
from .rewriting import rebind

if TYPE_CHECKING:
    from collections.abc import Callable

    from .query import QuerySource

    PredicateLike = Predicate | Callable[[Any], Any]

logger = logging.getLogger("cqrs_ddd.predicates.combinators")


def coerce_predicate(
    source: QuerySource[Any],
    predicate: PredicateLike,
    operation: str,
) -> Predicate:
    """
    Turn a callable or ready-made ``Predicate`` into a ``Predicate`` for
    *source*'s entity type.

    Raises:
        PredicateArityError: If a callable does not take exactly one argument.
        UsageContractError: If the predicate targets another entity type.
    """
    if isinstance(predicate, Predicate):
        if predicate.mapper is not entity_mapper(source.entity):
            raise UsageContractError(
                operation,
                f"predicate is bound to {predicate.mapper.class_.__name__}, "
                f"query selects {entity_mapper(source.entity).class_.__name__}",
            )
        return predicate
    if not callable(predicate):
        raise UsageContractError(
            operation,
            f"expected a predicate callable, got {type(predicate).__name__}",
        )
    return Predicate.of(source.entity, predicate, operation=operation)


def _append(source: QuerySource[Any], predicate: Predicate) -> QuerySource[Any]:
    return source.with_node(FilterStep(source.node, predicate))


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def where(source: QuerySource[Any], predicate: PredicateLike) -> QuerySource[Any]:
    """Append *predicate* as a new filter step, AND-ed with the existing ones."""
    return _append(source, coerce_predicate(source, predicate, "where"))


def or_where(source: QuerySource[Any], predicate: PredicateLike) -> QuerySource[Any]:
    """
    OR *predicate* into the outermost filter step.

    When the outermost link is not a combinable filter step (the origin,
    an opaque operation, an ``and_()`` boundary or a group marker) this
    behaves like :func:`where`.  Otherwise the new fragment is rebound onto
    the existing step's parameter and the step is replaced by
    ``existing OR new`` on the same base, so repeated calls accumulate
    into one ``(f1 OR f2 OR ...)`` step.
    """
    new = coerce_predicate(source, predicate, "or_where")
    step = as_filter_step(source.node)
    if step is None:
        logger.debug("or_where: no filter step to combine with, appending")
        return _append(source, new)

    body = rebind(new.fragment, new.parameter, step.parameter, operation="or_where")
    combined = Predicate(step.parameter, sql_or(step.fragment, body))
    return source.with_node(step.with_predicate(combined))


def and_(source: QuerySource[Any]) -> QuerySource[Any]:
    """
    Close the current OR-accumulation.

    The next ``or_where`` starts a new filter step, which is AND-ed with
    everything before the boundary.
    """
    return source.with_node(AndBoundary(source.node))


def and_if(source: QuerySource[Any], condition: bool) -> QuerySource[Any]:
    return and_(source) if condition else source


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def begin_group(source: QuerySource[Any]) -> QuerySource[Any]:
    """Open a group; everything until ``end_group()`` collapses into one step."""
    marker = GroupMarker(source.node, Predicate.always_true(source.entity))
    return source.with_node(marker)


def begin_group_if(source: QuerySource[Any], condition: bool) -> QuerySource[Any]:
    return begin_group(source) if condition else source


def end_group(source: QuerySource[Any]) -> QuerySource[Any]:
    """
    Collapse the filter steps since the last ``begin_group()`` into one.

    The collected fragments are rebound onto a single fresh parameter and
    AND-ed in the order they were added; the result becomes one filter
    step on top of whatever preceded the group marker.  An empty group is
    dropped without adding any filtering.

    Raises:
        UnmatchedGroupError: If no group marker precedes the current position,
            or a non-filter operation sits between it and the marker.
    """
    collected: list[Predicate] = []
    node = source.node
    while True:
        if isinstance(node, GroupMarker):
            base = node.base
            break
        if isinstance(node, AndBoundary):
            node = node.base
            continue
        if isinstance(node, FilterStep):
            collected.append(node.predicate)
            node = node.base
            continue
        raise UnmatchedGroupError("end_group")

    if not collected:
        logger.debug("end_group: empty group dropped")
        return source.with_node(base)

    collected.reverse()
    parameter = fresh_parameter(source.entity)
    fragments = [
        rebind(p.fragment, p.parameter, parameter, operation="end_group")
        for p in collected
    ]
    logger.debug("end_group: collapsed %d filter step(s)", len(fragments))
    combined = fragments[0] if len(fragments) == 1 else sql_and(*fragments)
    return source.with_node(FilterStep(base, Predicate(parameter, combined)))


def end_group_if(source: QuerySource[Any], condition: bool) -> QuerySource[Any]:
    return end_group(source) if condition else source
