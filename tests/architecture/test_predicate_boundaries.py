from pytest_archon import archrule


def test_node_model_independence() -> None:
    """
    The node model sits below the combinators.
    It must not reach up into the query surface or the lowering.
    """
    (
        archrule("node_model_independence")
        .match("cqrs_ddd_predicates.nodes")
        .should_not_import("cqrs_ddd_predicates.combinators")
        .should_not_import("cqrs_ddd_predicates.conditional")
        .should_not_import("cqrs_ddd_predicates.query")
        .should_not_import("cqrs_ddd_predicates.lowering*")
        .check("cqrs_ddd_predicates")
    )


def test_rewriting_layering() -> None:
    """Rewriting may use the node model, but not the combinators."""
    (
        archrule("rewriting_layering")
        .match("cqrs_ddd_predicates.rewriting")
        .should_not_import("cqrs_ddd_predicates.combinators")
        .should_not_import("cqrs_ddd_predicates.query")
        .should_not_import("cqrs_ddd_predicates.lowering*")
        .check("cqrs_ddd_predicates")
    )


def test_lowering_independence() -> None:
    """
    Pattern lowering only knows about primitives, options and errors.
    """
    (
        archrule("lowering_independence")
        .match("cqrs_ddd_predicates.lowering*")
        .should_not_import("cqrs_ddd_predicates.combinators")
        .should_not_import("cqrs_ddd_predicates.conditional")
        .should_not_import("cqrs_ddd_predicates.query")
        .should_not_import("cqrs_ddd_predicates.nodes")
        .should_not_import("cqrs_ddd_predicates.rewriting")
        .check("cqrs_ddd_predicates")
    )


def test_primitives_do_not_know_lowering() -> None:
    (
        archrule("primitives_independence")
        .match("cqrs_ddd_predicates.primitives")
        .should_not_import("cqrs_ddd_predicates.lowering*")
        .should_not_import("cqrs_ddd_predicates.query")
        .check("cqrs_ddd_predicates")
    )


def test_exceptions_are_a_leaf() -> None:
    (
        archrule("exceptions_leaf")
        .match("cqrs_ddd_predicates.exceptions")
        .should_not_import("cqrs_ddd_predicates.*")
        .check("cqrs_ddd_predicates")
    )
