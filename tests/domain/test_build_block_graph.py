from __future__ import annotations

import pytest

from domain.errors import DuplicateBlockIdError, SelfLoopError
from domain.models import EDGE_PARENT, EDGE_PREREQUISITE, Block, GraphEdge
from domain.services.build_block_graph import (
    build_block_graph,
    find_duplicate_ids,
    get_direct_postrequisites,
    get_direct_prerequisites,
    get_sub_blocks,
    is_descendant_of,
    is_root_node,
    relationships_for,
)
from tests.helpers.block_fixtures import load_blocks_fixture, make_block


def test_edges_point_from_referenced_block() -> None:
    graph = build_block_graph(
        [make_block("A"), make_block("B", prerequisites=["A"]), make_block("C", parents=["A"])]
    )

    assert graph.edges == [
        GraphEdge("A", "B", EDGE_PREREQUISITE),
        GraphEdge("A", "C", EDGE_PARENT),
    ]
    assert list(graph.blocks) == ["A", "B", "C"]
    assert graph.relationships is not None


def test_edge_count_matches_references() -> None:
    blocks = load_blocks_fixture("curriculum.json")

    graph = build_block_graph(blocks)

    expected = sum(len(block.prerequisites) + len(block.parents) for block in blocks)
    assert len(graph.edges) == expected == 11
    assert len(graph.edges_of_type(EDGE_PREREQUISITE)) == 5
    assert len(graph.edges_of_type(EDGE_PARENT)) == 6


def test_duplicate_ids_are_reported_together() -> None:
    blocks = [make_block("A"), make_block("B"), make_block("A"), make_block("B"), make_block("C")]

    assert find_duplicate_ids(blocks) == ["A", "B"]
    with pytest.raises(DuplicateBlockIdError) as excinfo:
        build_block_graph(blocks)

    assert excinfo.value.duplicate_ids == ["A", "B"]
    assert "A, B" in str(excinfo.value)


def test_block_listing_itself_as_prerequisite_is_rejected() -> None:
    with pytest.raises(SelfLoopError):
        build_block_graph([make_block("A", prerequisites=["A"])])


def test_dangling_references_are_kept_as_edges() -> None:
    graph = build_block_graph([make_block("A", prerequisites=["ghost"], parents=["nowhere"])])

    assert GraphEdge("ghost", "A", EDGE_PREREQUISITE) in graph.edges
    assert GraphEdge("nowhere", "A", EDGE_PARENT) in graph.edges
    assert get_direct_prerequisites("A", graph) == []
    assert not is_root_node("A", graph)


def test_extension_fields_survive_graph_build() -> None:
    block = make_block("A", credits=4, tags=["core"])

    graph = build_block_graph([block])

    stored = graph.blocks["A"]
    assert stored.extensions == {"credits": 4, "tags": ["core"]}
    assert stored.to_dict()["credits"] == 4


def test_relationships_for_builds_index_lazily() -> None:
    graph = build_block_graph([make_block("A"), make_block("B", prerequisites=["A"])])
    graph.relationships = None

    relationships = relationships_for(graph)

    assert relationships is graph.relationships
    assert relationships.get_postrequisites("A") == {"B"}


def test_sub_block_and_neighbor_queries() -> None:
    graph = build_block_graph(load_blocks_fixture("curriculum.json"))

    assert [block.id for block in get_sub_blocks("calculus-1", graph)] == ["limits", "derivatives"]
    assert get_sub_blocks("limits", graph) == []
    assert [block.id for block in get_direct_prerequisites("calculus-2", graph)] == [
        "calculus-1",
        "algebra",
    ]
    assert [block.id for block in get_direct_postrequisites("algebra", graph)] == [
        "calculus-1",
        "linear-algebra",
        "calculus-2",
    ]
    assert is_root_node("math", graph)
    assert not is_root_node("algebra", graph)


def test_is_descendant_of_walks_parent_chain() -> None:
    graph = build_block_graph(load_blocks_fixture("curriculum.json"))

    assert is_descendant_of("derivatives", "calculus-1", graph)
    assert is_descendant_of("derivatives", "math", graph)
    assert not is_descendant_of("math", "derivatives", graph)
    assert not is_descendant_of("algebra", "calculus-1", graph)


def test_block_requires_non_empty_id() -> None:
    with pytest.raises(ValueError):
        Block.model_validate({"id": "", "title": {"he": "a", "en": "a"}})
