"""
Immutable query source.

``QuerySource`` pairs the selected entity with the head of a filter
chain.  Every method returns a new source; chains are shared, never
copied or mutated.  ``to_select()`` materialises the chain into a
SQLAlchemy ``Select``; executing it is left to the caller's session::

    rows = (await session.scalars(source.to_select())).all()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import asc, desc, select
from sqlalchemy.orm import aliased

from . import combinators, conditional
from .nodes import (
    AndBoundary,
    FilterStep,
    GroupMarker,
    OpaqueStep,
    Origin,
    entity_mapper,
    iter_chain,
)
from .rewriting import rebind

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from sqlalchemy import Select

    from .combinators import PredicateLike
    from .nodes import ChainNode

logger = logging.getLogger("cqrs_ddd.predicates.query")

T = TypeVar("T")


class QuerySource(Generic[T]):
    """
    A selected entity plus a chain of deferred filter / shaping operations.

    Args:
        entity: Mapped class (or ``aliased()`` entity) to select.
        node: Head of an existing chain.  Defaults to a fresh ``Origin``.
    """

    __slots__ = ("entity", "node")

    def __init__(self, entity: type[T] | Any, node: ChainNode | None = None) -> None:
        self.entity = entity
        self.node: ChainNode = node if node is not None else Origin(entity)

    def with_node(self, node: ChainNode) -> QuerySource[T]:
        return QuerySource(self.entity, node)

    def __repr__(self) -> str:
        links = " <- ".join(type(n).__name__ for n in iter_chain(self.node))
        name = getattr(self.entity, "__name__", self.entity)
        return f"QuerySource({name}: {links})"

    # -- filtering -----------------------------------------------------------

    def where(self, predicate: PredicateLike) -> QuerySource[T]:
        return combinators.where(self, predicate)

    def or_where(self, predicate: PredicateLike) -> QuerySource[T]:
        return combinators.or_where(self, predicate)

    def and_(self) -> QuerySource[T]:
        return combinators.and_(self)

    def and_if(self, condition: bool) -> QuerySource[T]:
        return combinators.and_if(self, condition)

    # -- grouping ------------------------------------------------------------

    def begin_group(self) -> QuerySource[T]:
        return combinators.begin_group(self)

    def begin_group_if(self, condition: bool) -> QuerySource[T]:
        return combinators.begin_group_if(self, condition)

    def end_group(self) -> QuerySource[T]:
        return combinators.end_group(self)

    def end_group_if(self, condition: bool) -> QuerySource[T]:
        return combinators.end_group_if(self, condition)

    # -- conditional ---------------------------------------------------------

    def where_if(self, condition: bool, predicate: PredicateLike) -> QuerySource[T]:
        return conditional.where_if(self, condition, predicate)

    def or_where_if(self, condition: bool, predicate: PredicateLike) -> QuerySource[T]:
        return conditional.or_where_if(self, condition, predicate)

    def where_if_not_empty(
        self, value: str | UUID | None, predicate: PredicateLike
    ) -> QuerySource[T]:
        return conditional.where_if_not_empty(self, value, predicate)

    def where_if_not_blank(
        self, value: str | None, predicate: PredicateLike
    ) -> QuerySource[T]:
        return conditional.where_if_not_blank(self, value, predicate)

    def or_where_if_not_empty(
        self, value: str | UUID | None, predicate: PredicateLike
    ) -> QuerySource[T]:
        return conditional.or_where_if_not_empty(self, value, predicate)

    def or_where_if_not_blank(
        self, value: str | None, predicate: PredicateLike
    ) -> QuerySource[T]:
        return conditional.or_where_if_not_blank(self, value, predicate)

    # -- opaque operations ---------------------------------------------------

    def apply(
        self,
        name: str,
        fn: Callable[[Select[Any]], Select[Any]],
        *,
        bounds_rows: bool = False,
    ) -> QuerySource[T]:
        """
        Append an arbitrary statement transformation.

        Pass ``bounds_rows=True`` when *fn* restricts the rows (like a
        limit) so that later filters apply to its result.
        """
        return self._append_opaque(
            name, lambda stmt, _entity: fn(stmt), bounds_rows=bounds_rows
        )

    def order_by(self, *fields: Any) -> QuerySource[T]:
        """
        Order by column expressions or field names.

        Field names prefixed with ``-`` sort descending, e.g.
        ``order_by("-created_at", "name")``.
        """
        for field_expr in fields:
            self._order_clause(self.entity, field_expr)
        return self._append_opaque(
            "order_by",
            lambda stmt, entity: stmt.order_by(
                *(self._order_clause(entity, f) for f in fields)
            ),
        )

    def limit(self, limit: int) -> QuerySource[T]:
        return self._append_opaque(
            "limit", lambda stmt, _entity: stmt.limit(limit), bounds_rows=True
        )

    def offset(self, offset: int) -> QuerySource[T]:
        return self._append_opaque(
            "offset", lambda stmt, _entity: stmt.offset(offset), bounds_rows=True
        )

    def distinct(self) -> QuerySource[T]:
        return self._append_opaque(
            "distinct", lambda stmt, _entity: stmt.distinct(), bounds_rows=True
        )

    def _append_opaque(
        self,
        name: str,
        fn: Callable[[Select[Any], Any], Select[Any]],
        *,
        bounds_rows: bool = False,
    ) -> QuerySource[T]:
        return self.with_node(OpaqueStep(self.node, name, fn, bounds_rows))

    def _order_clause(self, entity: Any, field_expr: Any) -> Any:
        if not isinstance(field_expr, str):
            if entity is self.entity:
                return field_expr
            if hasattr(field_expr, "__clause_element__"):
                field_expr = field_expr.__clause_element__()
            return rebind(field_expr, self.entity, entity, operation="order_by")
        descending = field_expr.startswith("-")
        name = field_expr[1:] if descending else field_expr
        col = getattr(entity, name, None)
        if col is None:
            raise AttributeError(f"Model {entity} has no attribute {name}")
        return desc(col) if descending else asc(col)

    # -- materialisation -----------------------------------------------------

    def to_select(self) -> Select[Any]:
        """
        Build the ``Select`` for this source.

        Operations are applied in chain order.  Filter fragments are
        rebound onto the selected entity; group markers and ``and_()``
        boundaries emit nothing.  A filter that follows a limit, offset or
        distinct is applied to a subquery of everything before it, so
        ``.limit(10).where(...)`` filters the ten rows rather than the
        table.
        """
        target: Any = self.entity
        stmt: Select[Any] = select(target)
        bounded = False
        for node in reversed(list(iter_chain(self.node))):
            if isinstance(node, (Origin, GroupMarker, AndBoundary)):
                continue
            if isinstance(node, FilterStep):
                if bounded:
                    target = aliased(
                        entity_mapper(self.entity).class_, stmt.subquery()
                    )
                    stmt = select(target)
                    bounded = False
                    logger.debug("to_select: filtering a bounded subquery")
                stmt = stmt.where(
                    rebind(
                        node.fragment,
                        node.parameter,
                        target,
                        operation="to_select",
                    )
                )
            elif isinstance(node, OpaqueStep):
                stmt = node.apply(stmt, target)
                bounded = bounded or node.bounds_rows
        return stmt
