from __future__ import annotations

import os
from collections.abc import Generator

import pytest


def _clear_blocks_graph_env() -> None:
    for key in list(os.environ):
        if key.startswith("BLOCKS_GRAPH_"):
            os.environ.pop(key, None)


_clear_blocks_graph_env()


@pytest.fixture(autouse=True)
def clear_blocks_graph_env() -> Generator[None, None, None]:
    _clear_blocks_graph_env()
    yield
    _clear_blocks_graph_env()
