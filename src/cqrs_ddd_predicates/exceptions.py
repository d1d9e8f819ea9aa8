"""
Predicate exception hierarchy.

All exceptions inherit from ``PredicateError`` and provide ``to_dict()``
for API-friendly error responses.

"No translation" from a pattern translator is signalled by returning
``None``, never by raising.
"""

from __future__ import annotations

from typing import Any


class PredicateError(Exception):
    """Base exception for all predicate errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class UsageContractError(PredicateError):
    """A combinator was called in a way its contract does not allow."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}(): {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "USAGE_CONTRACT_VIOLATION",
            "operation": self.operation,
            "message": self.message,
        }


class PredicateArityError(UsageContractError):
    """A predicate callable does not take exactly one entity parameter."""

    def __init__(self, operation: str, parameter_count: int) -> None:
        self.parameter_count = parameter_count
        super().__init__(
            operation,
            "only single-parameter predicates are supported, "
            f"got {parameter_count} parameter(s)",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PREDICATE_ARITY",
            "operation": self.operation,
            "parameter_count": self.parameter_count,
        }


class UnmatchedGroupError(UsageContractError):
    """``end_group()`` found no ``begin_group()`` marker in the filter chain."""

    def __init__(self, operation: str = "end_group") -> None:
        super().__init__(operation, "called without a matching begin_group()")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNMATCHED_GROUP",
            "operation": self.operation,
        }


class UnsupportedProviderError(PredicateError):
    """
    Pattern lowering was requested for a dialect it cannot target.

    Raised when a translator is constructed against a non-PostgreSQL
    dialect, and when a pattern primitive is compiled for one.
    """

    def __init__(self, dialect_name: str, component: str) -> None:
        self.dialect_name = dialect_name
        self.component = component
        super().__init__(
            f"{component} supports only the PostgreSQL dialect, "
            f"got '{dialect_name}'"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_PROVIDER",
            "dialect": self.dialect_name,
            "component": self.component,
        }


class UnsupportedExpressionError(PredicateError):
    """
    A pattern primitive received a value expression it cannot escape.

    Starts-with / ends-with / contains accept only literals and bound
    parameters; a column reference would yield a pattern whose wildcards
    are not escaped.
    """

    def __init__(self, primitive: str, expression_type: str) -> None:
        self.primitive = primitive
        self.expression_type = expression_type
        super().__init__(
            f"{primitive} supports only literal and bound-parameter values, "
            f"got {expression_type}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_EXPRESSION",
            "primitive": self.primitive,
            "expression_type": self.expression_type,
        }


__all__: list[str] = [
    "PredicateArityError",
    "PredicateError",
    "UnmatchedGroupError",
    "UnsupportedExpressionError",
    "UnsupportedProviderError",
    "UsageContractError",
]
