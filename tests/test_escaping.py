"""Tests for LIKE wildcard escaping and lowering options."""

from __future__ import annotations

import dataclasses

import pytest
from pattern_trees import evaluate
from sqlalchemy import String, bindparam, literal
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import BindParameter
from sqlalchemy.sql.functions import Function

from cqrs_ddd_predicates import DEFAULT_LOWERING_OPTIONS, LoweringOptions, escape_like
from cqrs_ddd_predicates.lowering import escape_like_expression, like_replacements
from cqrs_ddd_predicates.lowering.escaping import (
    contains_pattern,
    ends_with_pattern,
    starts_with_pattern,
)

# -- Python-side escaping ----------------------------------------------------


def test_escape_like_escapes_wildcards_and_escape_char():
    assert escape_like("50% off_beat\\path") == "50\\% off\\_beat\\\\path"


def test_escape_like_handles_escape_before_wildcard():
    # escape char first, so the one added for % is not doubled
    assert escape_like("\\%") == "\\\\\\%"


def test_escape_like_leaves_plain_text():
    assert escape_like("Thompson") == "Thompson"


def test_escape_like_with_custom_escape_char():
    options = LoweringOptions(escape_char="!")
    assert escape_like("a!b%c_", options) == "a!!b!%c!_"


def test_like_replacements_order():
    assert like_replacements() == (
        ("\\", "\\\\"),
        ("%", "\\%"),
        ("_", "\\_"),
    )


# -- SQL-side escaping -------------------------------------------------------


def test_escape_like_expression_nests_replace_in_order():
    expr = escape_like_expression(bindparam("term", type_=String))

    olds = []
    node = expr
    while isinstance(node, Function):
        olds.append(node.clauses.clauses[1].value)
        node = node.clauses.clauses[0]

    # outermost first
    assert olds == ["_", "%", "\\"]
    assert isinstance(node, BindParameter)
    assert node.key == "term"


def test_escape_like_expression_compiles_to_replace_calls():
    expr = escape_like_expression(bindparam("term", type_=String))
    sql = str(expr.compile(dialect=postgresql.dialect()))
    assert sql.count("replace(") == 3


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("50% off_beat\\path", "50\\% off\\_beat\\\\path"),
        ("\\%", "\\\\\\%"),
        ("plain", "plain"),
    ],
)
def test_escape_like_expression_matches_python_escaping(value, expected):
    assert evaluate(escape_like_expression(literal(value, String))) == expected
    assert escape_like(value) == expected


@pytest.mark.parametrize(
    ("builder", "expected"),
    [
        (starts_with_pattern, "th%"),
        (ends_with_pattern, "%th"),
        (contains_pattern, "%th%"),
    ],
)
def test_pattern_builders(builder, expected):
    escaped = escape_like_expression(literal("th", String))
    assert evaluate(builder(escaped)) == expected


def test_contains_pattern_keeps_literal_percent_escaped():
    escaped = escape_like_expression(literal("5%", String))
    assert evaluate(contains_pattern(escaped)) == "%5\\%%"


def test_chained_concatenation_is_evaluated():
    chained = literal("%", String) + literal("x", String) + literal("%", String)

    assert chained.operator is operators.concat_op
    assert evaluate(chained) == "%x%"


# -- LoweringOptions ---------------------------------------------------------


def test_default_options():
    assert DEFAULT_LOWERING_OPTIONS.escape_char == "\\"
    assert DEFAULT_LOWERING_OPTIONS.lower_function == "lower"


@pytest.mark.parametrize("escape_char", ["", "ab", "%", "_"])
def test_options_reject_invalid_escape_char(escape_char):
    with pytest.raises(ValueError):
        LoweringOptions(escape_char=escape_char)


def test_options_reject_invalid_lower_function():
    with pytest.raises(ValueError, match="SQL identifier"):
        LoweringOptions(lower_function="lower()")


def test_options_are_frozen():
    options = LoweringOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.escape_char = "!"  # type: ignore[misc]
