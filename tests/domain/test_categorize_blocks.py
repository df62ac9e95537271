from __future__ import annotations

from domain.models import SelectionState
from domain.services.build_block_graph import build_block_graph
from domain.services.categorize_blocks import categorize_blocks, find_auto_skipped_root
from tests.helpers.block_fixtures import load_blocks_fixture, make_block


def test_single_root_is_skipped_in_root_view() -> None:
    blocks = [make_block("R"), make_block("X", parents=["R"]), make_block("Y", parents=["R"])]
    graph = build_block_graph(blocks)

    categorized = categorize_blocks(blocks, graph, SelectionState())

    assert find_auto_skipped_root(blocks, graph) == blocks[0]
    assert categorized.visible == {"X", "Y"}
    assert categorized.dimmed == set()
    assert not categorized.is_rendered("R")


def test_single_root_without_children_is_shown() -> None:
    blocks = [make_block("R")]
    graph = build_block_graph(blocks)

    assert find_auto_skipped_root(blocks, graph) is None
    assert categorize_blocks(blocks, graph, SelectionState()).visible == {"R"}


def test_multiple_roots_are_all_visible() -> None:
    blocks = [make_block("R1"), make_block("R2"), make_block("X", parents=["R1"])]
    graph = build_block_graph(blocks)

    categorized = categorize_blocks(blocks, graph, SelectionState())

    assert categorized.visible == {"R1", "R2"}
    assert categorized.dimmed == set()


def test_selection_shows_children_and_dims_other_roots() -> None:
    blocks = [make_block("A"), make_block("B", prerequisites=["A"]), make_block("C", parents=["A"])]
    graph = build_block_graph(blocks)

    root_view = categorize_blocks(blocks, graph, SelectionState())
    selected = categorize_blocks(blocks, graph, SelectionState.from_selected("A"))

    assert root_view.visible == {"A", "B"}
    assert selected.visible == {"A", "C"}
    assert selected.dimmed == {"B"}


def test_skipped_root_stays_hidden_while_drilling_into_descendant() -> None:
    blocks = load_blocks_fixture("curriculum.json")
    graph = build_block_graph(blocks)

    root_view = categorize_blocks(blocks, graph, SelectionState())
    drilled = categorize_blocks(blocks, graph, SelectionState.from_selected("calculus-1"))

    assert root_view.visible == {"algebra", "calculus-1", "linear-algebra", "calculus-2"}
    assert drilled.visible == {"calculus-1", "limits", "derivatives"}
    assert drilled.dimmed == set()
    assert not drilled.is_rendered("math")


def test_visible_and_dimmed_are_disjoint() -> None:
    blocks = [
        make_block("R1"),
        make_block("R2"),
        make_block("X", parents=["R1"]),
        make_block("Y", parents=["R2"]),
    ]
    graph = build_block_graph(blocks)

    for selected in ("R1", "R2", "X"):
        categorized = categorize_blocks(blocks, graph, SelectionState.from_selected(selected))
        assert not categorized.visible & categorized.dimmed
