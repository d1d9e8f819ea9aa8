"""
SQL compilation hooks for the pattern primitives.

On PostgreSQL each primitive is replaced by the expression the default
translator provider produces and that expression is compiled instead.
If no translator recognises the element it is rendered as a plain
function call.  Every other dialect is rejected.

Options can be passed per statement::

    stmt.compile(
        dialect=postgresql.dialect(),
        compile_kwargs={"lowering_options": LoweringOptions(escape_char="!")},
    )
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.compiler import compiles

from ..config import DEFAULT_LOWERING_OPTIONS
from ..exceptions import UnsupportedProviderError
from ..primitives import PATTERN_PRIMITIVES, PatternPrimitive
from .translators import build_default_provider


def _lower_for_postgresql(
    element: PatternPrimitive, compiler: Any, **kw: Any
) -> str:
    options = kw.get("lowering_options") or DEFAULT_LOWERING_OPTIONS
    provider = build_default_provider(compiler.dialect, options)
    lowered = provider.translate(element)
    if lowered is None:
        return str(compiler.visit_function(element, **kw))
    return str(compiler.process(lowered, **kw))


def _reject(element: PatternPrimitive, compiler: Any, **kw: Any) -> str:
    raise UnsupportedProviderError(compiler.dialect.name, type(element).__name__)


def register_compilers() -> None:
    for primitive in PATTERN_PRIMITIVES:
        compiles(primitive)(_reject)
        compiles(primitive, "postgresql")(_lower_for_postgresql)


register_compilers()
