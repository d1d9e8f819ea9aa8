"""Translators for the case-insensitive pattern primitives."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import func
from sqlalchemy.sql.elements import BindParameter

from ..config import DEFAULT_LOWERING_OPTIONS, LoweringOptions
from ..exceptions import UnsupportedExpressionError
from ..primitives import PatternKind, PatternPrimitive
from .escaping import (
    contains_pattern,
    ends_with_pattern,
    escape_like_expression,
    starts_with_pattern,
)
from .strategy import PatternTranslator, TranslatorProvider

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.engine import Dialect


def _kind_of(element: Any) -> PatternKind | None:
    if isinstance(element, PatternPrimitive):
        return element.kind
    return None


class EqualsLowerCaseTranslator(PatternTranslator):
    @property
    def kinds(self) -> frozenset[PatternKind]:
        return frozenset({PatternKind.EQUALS_LOWER_CASE})

    def translate(self, element: Any) -> ColumnElement[bool] | None:
        if _kind_of(element) is not PatternKind.EQUALS_LOWER_CASE:
            return None
        lower = getattr(func, self.options.lower_function)
        return cast(
            "ColumnElement[bool]",
            lower(element.source) == lower(element.value),
        )


_PATTERN_BUILDERS = {
    PatternKind.ILIKE_STARTS_WITH: starts_with_pattern,
    PatternKind.ILIKE_ENDS_WITH: ends_with_pattern,
    PatternKind.ILIKE_CONTAINS: contains_pattern,
}


class ILikeTranslator(PatternTranslator):
    """
    ``ILIKE`` with an explicit ``ESCAPE`` character.

    Plain ``ilike`` passes the caller's pattern through.  The
    starts-with / ends-with / contains variants escape the value's own
    wildcards and add ``%`` around it; the value must be a literal or a
    bound parameter.
    """

    @property
    def kinds(self) -> frozenset[PatternKind]:
        return frozenset({PatternKind.ILIKE, *_PATTERN_BUILDERS})

    def translate(self, element: Any) -> ColumnElement[bool] | None:
        kind = _kind_of(element)
        escape = self.options.escape_char

        if kind is PatternKind.ILIKE:
            return cast(
                "ColumnElement[bool]",
                element.source.ilike(element.value, escape=escape),
            )

        builder = _PATTERN_BUILDERS.get(kind) if kind is not None else None
        if builder is None:
            return None

        value = element.value
        if not isinstance(value, BindParameter):
            raise UnsupportedExpressionError(kind.value, type(value).__name__)

        pattern = builder(escape_like_expression(value, self.options))
        return cast(
            "ColumnElement[bool]",
            element.source.ilike(pattern, escape=escape),
        )


def build_default_provider(
    dialect: Dialect,
    options: LoweringOptions = DEFAULT_LOWERING_OPTIONS,
) -> TranslatorProvider:
    """Create a provider with both built-in translators for *dialect*."""
    provider = TranslatorProvider()
    provider.add_translators(
        ILikeTranslator(dialect, options),
        EqualsLowerCaseTranslator(dialect, options),
    )
    return provider
