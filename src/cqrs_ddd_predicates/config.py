"""
Lowering options.

``LoweringOptions`` is an immutable container for the knobs the pattern
lowering uses.  It is injected into translators and escaping helpers;
nothing is read from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoweringOptions:
    """
    Immutable lowering configuration.

    Attributes:
        escape_char: Single character used in ``ILIKE ... ESCAPE`` and to
            escape literal wildcards in starts-with / ends-with / contains
            values.
        lower_function: SQL function used by case-insensitive equality.
    """

    escape_char: str = "\\"
    lower_function: str = "lower"

    def __post_init__(self) -> None:
        if len(self.escape_char) != 1:
            raise ValueError(
                f"escape_char must be a single character, got {self.escape_char!r}"
            )
        if self.escape_char in ("%", "_"):
            raise ValueError("escape_char cannot be a LIKE wildcard")
        if not self.lower_function.isidentifier():
            raise ValueError(
                f"lower_function must be a SQL identifier, got {self.lower_function!r}"
            )


DEFAULT_LOWERING_OPTIONS = LoweringOptions()
