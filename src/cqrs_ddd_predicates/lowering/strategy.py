"""
Pattern lowering strategy.

Provides the ``PatternTranslator`` interface and the
``TranslatorProvider`` registry that asks each translator in turn.
A translator answers ``None`` for shapes it does not recognise, which
lets the provider (and ultimately the default SQL compilation) try
something else.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from sqlalchemy.dialects.postgresql.base import PGDialect

from ..config import DEFAULT_LOWERING_OPTIONS, LoweringOptions
from ..exceptions import UnsupportedProviderError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.engine import Dialect

    from ..primitives import PatternKind

logger = logging.getLogger("cqrs_ddd.predicates.lowering")


def require_postgresql(dialect: Dialect, component: str) -> PGDialect:
    """
    Fail fast unless *dialect* is a PostgreSQL dialect.

    Raises:
        UnsupportedProviderError: For any other dialect.
    """
    if not isinstance(dialect, PGDialect):
        raise UnsupportedProviderError(dialect.name, component)
    return dialect


class PatternTranslator(ABC):
    """
    Strategy interface for lowering pattern primitives into
    native PostgreSQL expressions.
    """

    def __init__(
        self,
        dialect: Dialect,
        options: LoweringOptions = DEFAULT_LOWERING_OPTIONS,
    ) -> None:
        self.dialect = require_postgresql(dialect, type(self).__name__)
        self.options = options

    @property
    @abstractmethod
    def kinds(self) -> frozenset[PatternKind]:
        """The primitives this strategy handles."""
        ...

    @abstractmethod
    def translate(self, element: Any) -> ColumnElement[bool] | None:
        """
        Lower *element* into a native expression.

        Returns:
            The replacement expression, or ``None`` when *element* is not
            a shape this translator handles.
        """
        ...


class TranslatorProvider:
    """Ordered collection of ``PatternTranslator`` instances."""

    def __init__(self) -> None:
        self._translators: list[PatternTranslator] = []

    def add_translators(self, *translators: PatternTranslator) -> None:
        self._translators.extend(translators)

    @property
    def supported_kinds(self) -> set[PatternKind]:
        kinds: set[PatternKind] = set()
        for translator in self._translators:
            kinds.update(translator.kinds)
        return kinds

    def translate(self, element: Any) -> ColumnElement[bool] | None:
        """Return the first translation offered, or ``None``."""
        for translator in self._translators:
            result = translator.translate(element)
            if result is not None:
                logger.debug(
                    "%s lowered %s",
                    type(translator).__name__,
                    getattr(element, "name", type(element).__name__),
                )
                return result
        return None
