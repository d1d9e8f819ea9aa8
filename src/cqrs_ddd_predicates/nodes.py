"""
Filter-chain node model.

A query's accumulated filtering is a linked chain of immutable nodes,
outermost first::

    FilterStep -> AndBoundary -> FilterStep -> GroupMarker -> OpaqueStep -> Origin

Each node references its ``base`` and is never mutated; combinators build
new nodes on top of (or in place of) the outermost one, so chains can be
shared freely between query sources.

The accessors here are purely structural.  They answer "not a filter step"
with ``None`` / ``False`` instead of raising.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import ColumnElement, false, true
from sqlalchemy import inspect as inspect_entity
from sqlalchemy.orm import aliased

from .exceptions import PredicateArityError, UsageContractError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy import Select
    from sqlalchemy.orm import Mapper

    PredicateFn = Callable[[Any], Any]


def entity_mapper(entity: Any) -> Mapper[Any]:
    """Return the mapper of a mapped class or ``aliased()`` entity."""
    return inspect_entity(entity).mapper


def fresh_parameter(entity: Any) -> Any:
    """Create a new, independent entity parameter for *entity*'s type."""
    return aliased(entity_mapper(entity).class_)


def _parameter_count(fn: PredicateFn, operation: str) -> int:
    try:
        return len(inspect.signature(fn).parameters)
    except (TypeError, ValueError) as exc:
        raise UsageContractError(
            operation, f"cannot inspect predicate {fn!r}"
        ) from exc


def _coerce_fragment(result: Any, operation: str) -> ColumnElement[bool]:
    if isinstance(result, bool):
        return true() if result else false()
    if not isinstance(result, ColumnElement) and hasattr(
        result, "__clause_element__"
    ):
        result = result.__clause_element__()
    if not isinstance(result, ColumnElement):
        raise UsageContractError(
            operation,
            "predicate must return a SQL boolean expression, "
            f"got {type(result).__name__}",
        )
    return result


@dataclass(frozen=True, eq=False)
class Predicate:
    """A boolean fragment bound to exactly one entity parameter."""

    parameter: Any
    fragment: ColumnElement[bool]

    @classmethod
    def of(
        cls,
        entity: Any,
        fn: PredicateFn,
        *,
        operation: str = "where",
    ) -> Predicate:
        """
        Build a predicate by calling *fn* once with a fresh parameter.

        Raises:
            PredicateArityError: If *fn* does not take exactly one argument.
            UsageContractError: If *fn* does not return a SQL expression.
        """
        count = _parameter_count(fn, operation)
        if count != 1:
            raise PredicateArityError(operation, count)
        parameter = fresh_parameter(entity)
        return cls(parameter, _coerce_fragment(fn(parameter), operation))

    @classmethod
    def always_true(cls, entity: Any) -> Predicate:
        return cls(fresh_parameter(entity), true())

    @property
    def mapper(self) -> Mapper[Any]:
        return entity_mapper(self.parameter)


@dataclass(frozen=True, eq=False)
class Origin:
    """Root of every chain: the entity the query selects."""

    entity: Any


@dataclass(frozen=True, eq=False)
class FilterStep:
    """One ``(base, predicate)`` link of the filter chain."""

    base: ChainNode
    predicate: Predicate

    @property
    def parameter(self) -> Any:
        return self.predicate.parameter

    @property
    def fragment(self) -> ColumnElement[bool]:
        return self.predicate.fragment

    def with_predicate(self, predicate: Predicate) -> FilterStep:
        """Rebuild this step with *predicate*, keeping the same base."""
        return FilterStep(self.base, predicate)


@dataclass(frozen=True, eq=False)
class GroupMarker(FilterStep):
    """Always-true filter step marking where a group begins."""


@dataclass(frozen=True, eq=False)
class AndBoundary:
    """
    Separates two OR-accumulations.

    ``or_where`` never combines across a boundary, so the next clause
    starts a fresh filter step that is AND-ed with everything before.
    Contributes no SQL of its own.
    """

    base: ChainNode


@dataclass(frozen=True, eq=False)
class OpaqueStep:
    """
    A non-filter operation (ordering, limit, ...) applied to the statement.

    ``apply`` is called with the statement built so far and the entity it
    currently selects.  ``bounds_rows`` marks operations that change which
    rows a later filter sees (limit, offset, distinct).
    """

    base: ChainNode
    name: str
    apply: Callable[[Select[Any], Any], Select[Any]]
    bounds_rows: bool = False


ChainNode = Origin | FilterStep | AndBoundary | OpaqueStep


# ---------------------------------------------------------------------------
# Structural accessors
# ---------------------------------------------------------------------------


def is_group_marker(node: ChainNode) -> bool:
    return isinstance(node, GroupMarker)


def as_filter_step(node: ChainNode) -> FilterStep | None:
    """
    Return *node* if it is a combinable filter step, else ``None``.

    Group markers are filter steps structurally but are never combined
    with, so they answer ``None`` here.
    """
    if isinstance(node, FilterStep) and not isinstance(node, GroupMarker):
        return node
    return None


def iter_chain(node: ChainNode) -> Iterator[ChainNode]:
    """Yield *node* and every base behind it, ending with the ``Origin``."""
    current: ChainNode = node
    while not isinstance(current, Origin):
        yield current
        current = current.base
    yield current
