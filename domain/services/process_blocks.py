from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from domain.models import (
    Block,
    BlockGraph,
    CategorizedBlocks,
    ConnectionPoints,
    GraphEdge,
    LayoutPlan,
    SelectionState,
)
from domain.ports.layout import LayoutEngine
from domain.services.build_block_graph import build_block_graph, relationships_for
from domain.services.categorize_blocks import categorize_blocks
from domain.services.geometry import calculate_connection_points, calculate_view_box
from domain.services.transitive_reduction import remove_transitive_edges

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeConnection:
    edge: GraphEdge
    points: ConnectionPoints


@dataclass(frozen=True)
class ProcessedGraph:
    graph: BlockGraph
    plan: LayoutPlan
    edges: list[GraphEdge]


@dataclass(frozen=True)
class GraphView:
    graph: BlockGraph
    plan: LayoutPlan
    selection: SelectionState
    categorized: CategorizedBlocks
    edges: list[GraphEdge]
    connections: list[EdgeConnection]

    def to_dict(self) -> dict[str, Any]:
        return {
            "selection": {
                "selected_block_id": self.selection.selected_block_id,
                "navigation_stack": list(self.selection.navigation_stack),
            },
            "view_box": calculate_view_box(self.plan.positioned).to_dict(),
            "blocks": [
                {
                    "block": item.block.to_dict(),
                    "position": item.position.to_dict(),
                    "level": self.plan.levels.get(item.block.id, 0),
                    "dimmed": item.block.id in self.categorized.dimmed,
                }
                for item in self.plan.positioned
            ],
            "edges": [
                {**connection.edge.to_dict(), "points": connection.points.to_dict()}
                for connection in self.connections
            ],
        }


class BlocksGraphProcessor:
    def __init__(self, layout_engine: LayoutEngine, *, transitive_reduction: bool = True) -> None:
        self.layout_engine = layout_engine
        self.transitive_reduction = transitive_reduction

    def process(self, blocks: Sequence[Block]) -> ProcessedGraph:
        graph = build_block_graph(blocks)
        if relationships_for(graph).detect_cycles() is not None:
            logger.warning("Prerequisite graph contains cycles; layout order is best-effort")
        plan = self.layout_engine.build_plan(graph)
        edges = remove_transitive_edges(graph.edges) if self.transitive_reduction else list(graph.edges)
        return ProcessedGraph(graph=graph, plan=plan, edges=edges)

    def render_view(self, blocks: Sequence[Block], selection: SelectionState) -> GraphView:
        full_graph = build_block_graph(blocks)
        categorized = categorize_blocks(blocks, full_graph, selection)
        rendered_blocks = [block for block in blocks if categorized.is_rendered(block.id)]
        processed = self.process(rendered_blocks)

        connections: list[EdgeConnection] = []
        positions = processed.plan.positions
        for edge in processed.edges:
            source = positions.get(edge.source)
            target = positions.get(edge.target)
            if source is None or target is None:
                continue
            connections.append(
                EdgeConnection(
                    edge=edge,
                    points=calculate_connection_points(
                        source, target, self.layout_engine.orientation
                    ),
                )
            )

        return GraphView(
            graph=processed.graph,
            plan=processed.plan,
            selection=selection,
            categorized=categorized,
            edges=processed.edges,
            connections=connections,
        )
