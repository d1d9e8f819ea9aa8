"""
Lowering of pattern primitives into PostgreSQL expressions.

Public API:
    - ``build_default_provider(dialect)``: provider holding the built-in
      translators
    - ``PatternTranslator`` / ``TranslatorProvider``: extension points for
      custom translators
    - ``escape_like`` / ``escape_like_expression``: LIKE wildcard escaping

Importing this package registers the SQL compilation hooks.
"""

from .compilation import register_compilers
from .escaping import escape_like, escape_like_expression, like_replacements
from .strategy import PatternTranslator, TranslatorProvider, require_postgresql
from .translators import (
    EqualsLowerCaseTranslator,
    ILikeTranslator,
    build_default_provider,
)

__all__ = [
    "build_default_provider",
    "register_compilers",
    "PatternTranslator",
    "TranslatorProvider",
    "EqualsLowerCaseTranslator",
    "ILikeTranslator",
    "require_postgresql",
    "escape_like",
    "escape_like_expression",
    "like_replacements",
]
