from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Dict, List

from domain.models import (
    DEFAULT_ORIENTATION,
    BlockGraph,
    BlockPosition,
    LayoutPlan,
    Orientation,
    PositionedBlock,
    SiblingGroup,
)
from domain.ports.layout import LayoutEngine
from domain.services.assign_levels import calculate_levels

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    node_width: float = 200.0
    node_height: float = 80.0
    horizontal_spacing: float = 80.0
    vertical_spacing: float = 100.0
    orientation: Orientation = DEFAULT_ORIENTATION
    max_nodes_per_level: int | None = None

    @property
    def is_vertical(self) -> bool:
        return self.orientation in ("ttb", "btt")

    @property
    def is_reversed(self) -> bool:
        return self.orientation in ("btt", "rtl")

    @property
    def sibling_node_size(self) -> float:
        return self.node_width if self.is_vertical else self.node_height

    @property
    def sibling_spacing(self) -> float:
        return self.horizontal_spacing if self.is_vertical else self.vertical_spacing

    def wraps(self, count: int) -> bool:
        limit = self.max_nodes_per_level
        return limit is not None and limit > 0 and count > limit


class HierarchicalLayoutEngine(LayoutEngine):
    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config or LayoutConfig()

    @property
    def orientation(self) -> Orientation:
        return self.config.orientation

    def build_plan(self, graph: BlockGraph) -> LayoutPlan:
        levels = calculate_levels(graph)
        blocks_by_level = group_blocks_by_level(levels)
        max_level = max(blocks_by_level, default=0)
        level_offsets = self._calculate_level_offsets(blocks_by_level, max_level)
        positions = self._calculate_positions(graph, blocks_by_level, level_offsets, max_level)
        positioned = [
            PositionedBlock(block=block, position=positions[block_id])
            for block_id, block in graph.blocks.items()
            if block_id in positions
        ]
        logger.debug(
            "Laid out %d blocks over %d levels (%s)",
            len(positioned),
            len(blocks_by_level),
            self.config.orientation,
        )
        return LayoutPlan(positions=positions, levels=levels, positioned=positioned)

    def _calculate_level_offsets(
        self, blocks_by_level: Mapping[int, List[str]], max_level: int
    ) -> Dict[int, float]:
        config = self.config
        offsets: Dict[int, float] = {}
        current = 0.0
        level_node_size = config.node_height if config.is_vertical else config.node_width
        level_spacing = config.vertical_spacing if config.is_vertical else config.horizontal_spacing

        for level in sorted(blocks_by_level, reverse=config.is_reversed):
            adjusted_level = max_level - level if config.is_reversed else level
            offsets[adjusted_level] = current
            count = len(blocks_by_level[level])
            if config.wraps(count):
                lines = math.ceil(count / config.max_nodes_per_level)
                extent = lines * level_node_size + (lines - 1) * level_spacing
            else:
                extent = level_node_size
            current += extent + level_spacing
        return offsets

    def _calculate_positions(
        self,
        graph: BlockGraph,
        blocks_by_level: Mapping[int, List[str]],
        level_offsets: Mapping[int, float],
        max_level: int,
    ) -> Dict[str, BlockPosition]:
        config = self.config
        positions: Dict[str, BlockPosition] = {}

        for level in sorted(blocks_by_level):
            block_ids = blocks_by_level[level]
            adjusted_level = max_level - level if config.is_reversed else level
            level_offset = level_offsets.get(adjusted_level, 0.0)

            has_positioned_prerequisites = any(
                prerequisite_id in positions
                for block_id in block_ids
                for prerequisite_id in _prerequisite_ids(block_id, graph)
            )
            if not has_positioned_prerequisites:
                for index, block_id in enumerate(block_ids):
                    positions[block_id] = self._grid_position(index, level_offset, len(block_ids))
            else:
                self._position_level_around_prerequisites(block_ids, graph, positions, level_offset)
        return positions

    def _grid_position(self, index: int, level_offset: float, count: int) -> BlockPosition:
        config = self.config
        column_step = config.node_width + config.horizontal_spacing
        row_step = config.node_height + config.vertical_spacing
        limit = config.max_nodes_per_level

        if config.wraps(count) and limit is not None:
            if config.is_vertical:
                row, column = divmod(index, limit)
                x = column * column_step
                y = level_offset + row * row_step
            else:
                column, row = divmod(index, limit)
                if config.is_reversed:
                    column = math.ceil(count / limit) - 1 - column
                x = level_offset + column * column_step
                y = row * row_step
        elif config.is_vertical:
            x = index * column_step
            y = level_offset
        else:
            x = level_offset
            y = index * row_step
        return BlockPosition(x=x, y=y, width=config.node_width, height=config.node_height)

    def _position_level_around_prerequisites(
        self,
        block_ids: Sequence[str],
        graph: BlockGraph,
        positions: Dict[str, BlockPosition],
        level_offset: float,
    ) -> None:
        config = self.config
        node_size = config.sibling_node_size
        spacing = config.sibling_spacing

        groups = build_sibling_groups(
            group_blocks_by_prerequisites(block_ids, graph),
            graph,
            positions,
            node_size,
            config.is_vertical,
        )
        targets: Dict[str, float] = {}
        for group in groups:
            targets.update(
                distribute_siblings_around_centroid(group.siblings, group.centroid, node_size, spacing)
            )

        ordered = sorted(block_ids, key=lambda block_id: targets.get(block_id, 0.0))
        resolved = resolve_overlaps(ordered, targets, node_size, spacing)
        for block_id in ordered:
            sibling_axis = resolved.get(block_id, 0.0)
            if config.is_vertical:
                x, y = sibling_axis, level_offset
            else:
                x, y = level_offset, sibling_axis
            positions[block_id] = BlockPosition(
                x=x, y=y, width=config.node_width, height=config.node_height
            )


def group_blocks_by_level(levels: Mapping[str, int]) -> Dict[int, List[str]]:
    blocks_by_level: Dict[int, List[str]] = {}
    for block_id, level in levels.items():
        blocks_by_level.setdefault(level, []).append(block_id)
    return dict(sorted(blocks_by_level.items()))


def prerequisite_signature(block_id: str, graph: BlockGraph) -> str:
    return ",".join(sorted(_prerequisite_ids(block_id, graph)))


def group_blocks_by_prerequisites(
    block_ids: Sequence[str], graph: BlockGraph
) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for block_id in block_ids:
        groups.setdefault(prerequisite_signature(block_id, graph), []).append(block_id)
    return groups


def calculate_prerequisite_centroid(
    block_id: str,
    graph: BlockGraph,
    positions: Mapping[str, BlockPosition],
    node_size: float,
    is_vertical: bool,
) -> float | None:
    centers: List[float] = []
    for prerequisite_id in _prerequisite_ids(block_id, graph):
        position = positions.get(prerequisite_id)
        if position is None:
            continue
        origin = position.x if is_vertical else position.y
        centers.append(origin + node_size / 2)
    if not centers:
        return None
    return sum(centers) / len(centers)


def build_sibling_groups(
    groups: Mapping[str, List[str]],
    graph: BlockGraph,
    positions: Mapping[str, BlockPosition],
    node_size: float,
    is_vertical: bool,
) -> List[SiblingGroup]:
    sibling_groups: List[SiblingGroup] = []
    for signature, siblings in groups.items():
        if not siblings:
            continue
        centroid = calculate_prerequisite_centroid(
            siblings[0], graph, positions, node_size, is_vertical
        )
        sibling_groups.append(
            SiblingGroup(
                signature=signature,
                siblings=list(siblings),
                centroid=centroid if centroid is not None else 0.0,
            )
        )
    return sorted(sibling_groups, key=lambda group: group.centroid)


def distribute_siblings_around_centroid(
    siblings: Sequence[str], centroid: float, node_size: float, spacing: float
) -> Dict[str, float]:
    count = len(siblings)
    if count == 0:
        return {}
    span = count * node_size + (count - 1) * spacing
    start = centroid - span / 2
    return {sibling: start + index * (node_size + spacing) for index, sibling in enumerate(siblings)}


def resolve_overlaps(
    block_ids: Sequence[str],
    targets: Mapping[str, float],
    node_size: float,
    spacing: float,
) -> Dict[str, float]:
    ordered = sorted(block_ids, key=lambda block_id: targets.get(block_id, 0.0))
    resolved: Dict[str, float] = {}
    previous: float | None = None
    for block_id in ordered:
        current = targets.get(block_id, 0.0)
        if previous is not None:
            current = max(current, previous + node_size + spacing)
        resolved[block_id] = current
        previous = current
    return resolved


def _prerequisite_ids(block_id: str, graph: BlockGraph) -> List[str]:
    block = graph.blocks.get(block_id)
    return list(block.prerequisites) if block is not None else []
