from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from domain.errors import DuplicateBlockIdError
from domain.models import EDGE_PARENT, EDGE_PREREQUISITE, Block, BlockGraph, GraphEdge
from domain.services.horizontal_relationships import HorizontalRelationships

logger = logging.getLogger(__name__)


def find_duplicate_ids(blocks: Iterable[Block]) -> list[str]:
    seen: set[str] = set()
    duplicates: dict[str, None] = {}
    for block in blocks:
        if block.id in seen:
            duplicates[block.id] = None
        seen.add(block.id)
    return list(duplicates)


def ensure_unique_block_ids(blocks: Sequence[Block]) -> None:
    duplicates = find_duplicate_ids(blocks)
    if duplicates:
        raise DuplicateBlockIdError(duplicates)


def build_block_graph(blocks: Sequence[Block]) -> BlockGraph:
    ensure_unique_block_ids(blocks)

    block_map: dict[str, Block] = {block.id: block for block in blocks}
    edges: list[GraphEdge] = []
    for block in blocks:
        for prerequisite_id in block.prerequisites:
            edges.append(GraphEdge(prerequisite_id, block.id, EDGE_PREREQUISITE))
        for parent_id in block.parents:
            edges.append(GraphEdge(parent_id, block.id, EDGE_PARENT))

    relationships = HorizontalRelationships.from_blocks(blocks)
    logger.debug("Built block graph with %d blocks and %d edges", len(block_map), len(edges))
    return BlockGraph(blocks=block_map, edges=edges, relationships=relationships)


def relationships_for(graph: BlockGraph) -> HorizontalRelationships:
    if graph.relationships is None:
        graph.relationships = HorizontalRelationships.from_graph(graph)
    return graph.relationships


def get_sub_blocks(block_id: str, graph: BlockGraph) -> list[Block]:
    sub_blocks: list[Block] = []
    for edge in graph.edges:
        if edge.source != block_id or edge.edge_type != EDGE_PARENT:
            continue
        sub_block = graph.blocks.get(edge.target)
        if sub_block is not None:
            sub_blocks.append(sub_block)
    return sub_blocks


def get_direct_prerequisites(block_id: str, graph: BlockGraph) -> list[Block]:
    block = graph.blocks.get(block_id)
    if block is None:
        return []
    return [graph.blocks[item] for item in block.prerequisites if item in graph.blocks]


def get_direct_postrequisites(block_id: str, graph: BlockGraph) -> list[Block]:
    dependent_ids = relationships_for(graph).get_postrequisites(block_id)
    return [block for key, block in graph.blocks.items() if key in dependent_ids]


def is_root_node(block_id: str, graph: BlockGraph) -> bool:
    return not any(edge.target == block_id for edge in graph.edges)


def is_descendant_of(block_id: str, ancestor_id: str, graph: BlockGraph) -> bool:
    visited: set[str] = set()
    stack = [block_id]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        block = graph.blocks.get(current)
        if block is None:
            continue
        if ancestor_id in block.parents:
            return True
        stack.extend(block.parents)
    return False
