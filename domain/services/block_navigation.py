from __future__ import annotations

import logging

from domain.models import BlockGraph, BlockSelectedEvent, NavigationResult, SelectionState
from domain.services.build_block_graph import get_sub_blocks

logger = logging.getLogger(__name__)


def handle_block_navigation(
    block_id: str,
    graph: BlockGraph,
    state: SelectionState,
) -> NavigationResult:
    if block_id not in graph.blocks:
        logger.debug("Ignoring click on unknown block %s", block_id)
        return NavigationResult(should_render=False, state=state)

    if not get_sub_blocks(block_id, graph):
        event = BlockSelectedEvent(
            block_id=block_id,
            selection_level=state.selection_level,
            navigation_stack=state.navigation_stack,
        )
        return NavigationResult(should_render=False, state=state, event=event)

    if state.selected_block_id == block_id:
        next_state = state.pop()
    else:
        next_state = state.push(block_id)

    event = BlockSelectedEvent(
        block_id=next_state.selected_block_id,
        selection_level=next_state.selection_level,
        navigation_stack=next_state.navigation_stack,
    )
    return NavigationResult(should_render=True, state=next_state, event=event)
