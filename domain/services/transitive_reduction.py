from __future__ import annotations

from collections import deque
from collections.abc import Mapping, Sequence

from domain.models import EDGE_PREREQUISITE, GraphEdge


def remove_transitive_edges(edges: Sequence[GraphEdge]) -> list[GraphEdge]:
    prerequisite_edges = [edge for edge in edges if edge.edge_type == EDGE_PREREQUISITE]
    other_edges = [edge for edge in edges if edge.edge_type != EDGE_PREREQUISITE]

    adjacency: dict[str, list[str]] = {}
    for edge in prerequisite_edges:
        targets = adjacency.setdefault(edge.source, [])
        if edge.target not in targets:
            targets.append(edge.target)

    kept = [
        edge
        for edge in prerequisite_edges
        if not _has_indirect_path(adjacency, edge.source, edge.target)
    ]
    return kept + other_edges


def _has_indirect_path(adjacency: Mapping[str, list[str]], source: str, target: str) -> bool:
    visited: set[str] = set()
    queue: deque[str] = deque()
    for neighbor in adjacency.get(source, []):
        if neighbor != target:
            queue.append(neighbor)
            visited.add(neighbor)

    while queue:
        current = queue.popleft()
        if current == target:
            return True
        for neighbor in adjacency.get(current, []):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return False
