"""Composable SQLAlchemy predicates with PostgreSQL case-insensitive matching."""

from . import lowering  # noqa: F401  registers the pattern-primitive compilers
from .combinators import (
    and_,
    and_if,
    begin_group,
    begin_group_if,
    end_group,
    end_group_if,
    or_where,
    where,
)
from .conditional import (
    is_not_blank,
    is_not_empty,
    or_where_if,
    or_where_if_not_blank,
    or_where_if_not_empty,
    where_if,
    where_if_not_blank,
    where_if_not_empty,
)
from .config import DEFAULT_LOWERING_OPTIONS, LoweringOptions
from .exceptions import (
    PredicateArityError,
    PredicateError,
    UnmatchedGroupError,
    UnsupportedExpressionError,
    UnsupportedProviderError,
    UsageContractError,
)
from .lowering import (
    EqualsLowerCaseTranslator,
    ILikeTranslator,
    PatternTranslator,
    TranslatorProvider,
    build_default_provider,
    escape_like,
)
from .nodes import (
    AndBoundary,
    FilterStep,
    GroupMarker,
    OpaqueStep,
    Origin,
    Predicate,
    as_filter_step,
    is_group_marker,
)
from .primitives import (
    PatternKind,
    equals_lower_case,
    ilike,
    ilike_contains,
    ilike_ends_with,
    ilike_starts_with,
)
from .query import QuerySource
from .rewriting import rebind, rebind_predicate

__all__ = [
    # Query source
    "QuerySource",
    # Combinators
    "where",
    "or_where",
    "and_",
    "and_if",
    "begin_group",
    "begin_group_if",
    "end_group",
    "end_group_if",
    "where_if",
    "or_where_if",
    "where_if_not_empty",
    "where_if_not_blank",
    "or_where_if_not_empty",
    "or_where_if_not_blank",
    "is_not_empty",
    "is_not_blank",
    # Node model
    "Predicate",
    "Origin",
    "FilterStep",
    "GroupMarker",
    "AndBoundary",
    "OpaqueStep",
    "as_filter_step",
    "is_group_marker",
    # Rewriting
    "rebind",
    "rebind_predicate",
    # Pattern primitives / lowering
    "PatternKind",
    "equals_lower_case",
    "ilike",
    "ilike_starts_with",
    "ilike_ends_with",
    "ilike_contains",
    "PatternTranslator",
    "TranslatorProvider",
    "EqualsLowerCaseTranslator",
    "ILikeTranslator",
    "build_default_provider",
    "escape_like",
    # Configuration
    "LoweringOptions",
    "DEFAULT_LOWERING_OPTIONS",
    # Exceptions
    "PredicateError",
    "UsageContractError",
    "PredicateArityError",
    "UnmatchedGroupError",
    "UnsupportedProviderError",
    "UnsupportedExpressionError",
]
