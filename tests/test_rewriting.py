"""Tests for parameter substitution."""

from __future__ import annotations

import pytest
from predicate_models import Person, Pet
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import aliased

from cqrs_ddd_predicates import (
    Predicate,
    UsageContractError,
    ilike_contains,
    rebind,
    rebind_predicate,
)


@pytest.fixture
def p1():
    return aliased(Person, name="p1")


@pytest.fixture
def p2():
    return aliased(Person, name="p2")


def test_rebind_replaces_source_columns(p1, p2):
    fragment = (p1.first_name == "Alice") | (p1.last_name == "Smith")

    rebound = rebind(fragment, p1, p2)

    sql = str(rebound)
    assert "p2.first_name" in sql
    assert "p2.last_name" in sql
    assert "p1." not in sql


def test_rebind_leaves_input_untouched(p1, p2):
    fragment = p1.first_name == "Alice"
    rebind(fragment, p1, p2)
    assert "p1.first_name" in str(fragment)


def test_rebind_onto_mapped_class(p1):
    rebound = rebind(p1.first_name == "Alice", p1, Person)
    assert "people.first_name" in str(rebound)


def test_rebind_same_parameter_is_identity(p1):
    fragment = p1.first_name == "Alice"
    assert rebind(fragment, p1, p1) is fragment


def test_rebind_keeps_other_entities(p1, p2):
    fragment = (p1.first_name == "Alice") & (Pet.name == "Rex")

    sql = str(rebind(fragment, p1, p2))

    assert "p2.first_name" in sql
    assert "pets.name" in sql


def test_rebind_rejects_different_mapped_class(p1):
    with pytest.raises(UsageContractError) as exc_info:
        rebind(p1.first_name == "Alice", p1, aliased(Pet), operation="or_where")
    assert exc_info.value.operation == "or_where"


def test_rebind_reaches_pattern_primitive_arguments(p1, p2):
    rebound = rebind(ilike_contains(p1.last_name, "il"), p1, p2)

    sql = str(rebound.compile(dialect=postgresql.dialect()))

    assert "p2.last_name" in sql
    assert "p1." not in sql


def test_rebind_reaches_correlated_subquery(p1):
    fragment = p1.pets.any(Pet.name == "Rex")

    sql = str(rebind(fragment, p1, Person))

    assert "people.id" in sql
    assert "p1." not in sql


def test_rebind_predicate(p1, p2):
    predicate = Predicate(p1, p1.first_name == "Alice")

    assert rebind_predicate(predicate, p1) is predicate

    moved = rebind_predicate(predicate, p2)
    assert moved.parameter is p2
    assert "p2.first_name" in str(moved.fragment)
