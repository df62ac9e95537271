from __future__ import annotations

import logging

from domain.models import BlockGraph

logger = logging.getLogger(__name__)


def find_root_ids(graph: BlockGraph) -> list[str]:
    targets = {edge.target for edge in graph.edges if edge.source in graph.blocks}
    return [block_id for block_id in graph.blocks if block_id not in targets]


def calculate_levels(graph: BlockGraph, max_iterations: int | None = None) -> dict[str, int]:
    children: dict[str, list[str]] = {block_id: [] for block_id in graph.blocks}
    for edge in graph.edges:
        if edge.source not in graph.blocks or edge.target not in graph.blocks:
            continue
        if edge.target not in children[edge.source]:
            children[edge.source].append(edge.target)

    roots = find_root_ids(graph) or list(graph.blocks)
    # No simple path is longer than the block count; deeper levels only come from cycles.
    depth_ceiling = max(len(graph.blocks) - 1, 0)
    budget = (
        max_iterations
        if max_iterations is not None
        else (len(graph.blocks) + 1) * (sum(len(v) for v in children.values()) + 1)
    )
    levels: dict[str, int] = {}
    iterations = 0

    def relax(start: str) -> bool:
        nonlocal iterations
        stack = [(start, 0)]
        while stack:
            iterations += 1
            if iterations > budget:
                return False
            block_id, level = stack.pop()
            if level <= levels.get(block_id, -1):
                continue
            levels[block_id] = level
            if level >= depth_ceiling:
                continue
            for child_id in reversed(children[block_id]):
                if level + 1 > levels.get(child_id, -1):
                    stack.append((child_id, level + 1))
        return True

    for root_id in roots:
        if not relax(root_id):
            logger.warning(
                "Level assignment stopped after %d iterations; remaining blocks use level 0",
                budget,
            )
            break

    for block_id in graph.blocks:
        if block_id not in levels:
            if iterations <= budget:
                relax(block_id)
            levels.setdefault(block_id, 0)

    return {block_id: levels[block_id] for block_id in graph.blocks}
