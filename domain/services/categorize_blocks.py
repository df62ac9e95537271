from __future__ import annotations

from collections.abc import Sequence

from domain.models import Block, BlockGraph, CategorizedBlocks, SelectionState
from domain.services.build_block_graph import get_sub_blocks, is_descendant_of


def find_auto_skipped_root(blocks: Sequence[Block], graph: BlockGraph) -> Block | None:
    root_blocks = [block for block in blocks if not block.is_sub_block]
    if len(root_blocks) != 1:
        return None
    single_root = root_blocks[0]
    if not get_sub_blocks(single_root.id, graph):
        return None
    return single_root


def categorize_blocks(
    blocks: Sequence[Block],
    graph: BlockGraph,
    selection: SelectionState,
) -> CategorizedBlocks:
    visible: set[str] = set()
    dimmed: set[str] = set()
    root_blocks = [block for block in blocks if not block.is_sub_block]
    skipped_root = find_auto_skipped_root(blocks, graph)
    selected_block_id = selection.selected_block_id

    if selected_block_id is None:
        if skipped_root is not None:
            visible.update(child.id for child in get_sub_blocks(skipped_root.id, graph))
        else:
            visible.update(block.id for block in root_blocks)
        return CategorizedBlocks(visible=visible, dimmed=dimmed)

    visible.add(selected_block_id)
    visible.update(child.id for child in get_sub_blocks(selected_block_id, graph))

    hidden_root_id: str | None = None
    if skipped_root is not None and is_descendant_of(selected_block_id, skipped_root.id, graph):
        hidden_root_id = skipped_root.id

    for block in root_blocks:
        if block.id in visible or block.id == hidden_root_id:
            continue
        dimmed.add(block.id)

    return CategorizedBlocks(visible=visible, dimmed=dimmed)
