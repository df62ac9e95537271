from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from domain.models import EDGE_PARENT, EDGE_PREREQUISITE, BlockGraph
from domain.services.assign_levels import calculate_levels, find_root_ids
from domain.services.build_block_graph import relationships_for


@dataclass(frozen=True)
class GraphDiagnostics:
    blocks: int
    prerequisite_edges: int
    parent_edges: int
    roots: list[str]
    dangling_references: list[tuple[str, str]]
    is_acyclic: bool
    cycles: list[list[str]] | None
    topological_order: list[str] | None
    max_level: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocks": self.blocks,
            "prerequisite_edges": self.prerequisite_edges,
            "parent_edges": self.parent_edges,
            "roots": list(self.roots),
            "dangling_references": [list(pair) for pair in self.dangling_references],
            "is_acyclic": self.is_acyclic,
            "cycles": self.cycles,
            "topological_order": self.topological_order,
            "max_level": self.max_level,
        }


def compute_graph_diagnostics(graph: BlockGraph) -> GraphDiagnostics:
    relationships = relationships_for(graph)
    cycles = relationships.detect_cycles()
    order = relationships.get_topological_order()
    levels = calculate_levels(graph)

    dangling: list[tuple[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for edge in graph.edges:
        if edge.source in graph.blocks:
            continue
        pair = (edge.target, edge.source)
        if pair in seen:
            continue
        seen.add(pair)
        dangling.append(pair)

    return GraphDiagnostics(
        blocks=len(graph.blocks),
        prerequisite_edges=len(graph.edges_of_type(EDGE_PREREQUISITE)),
        parent_edges=len(graph.edges_of_type(EDGE_PARENT)),
        roots=find_root_ids(graph),
        dangling_references=dangling,
        is_acyclic=cycles is None,
        cycles=cycles,
        topological_order=order,
        max_level=max(levels.values(), default=0),
    )
