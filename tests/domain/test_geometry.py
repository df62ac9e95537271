from __future__ import annotations

import pytest

from domain.models import BlockPosition, ConnectionPoints, PositionedBlock, ViewBox
from domain.services.build_block_graph import build_block_graph
from domain.services.geometry import (
    DEFAULT_VIEW_BOX,
    calculate_connection_points,
    calculate_view_box,
)
from tests.helpers.block_fixtures import make_block

SOURCE = BlockPosition(x=0, y=0, width=200, height=80)
TARGET = BlockPosition(x=300, y=200, width=200, height=80)


@pytest.mark.parametrize(
    ("orientation", "expected"),
    [
        ("ttb", ConnectionPoints(x1=100, y1=80, x2=400, y2=200)),
        ("btt", ConnectionPoints(x1=100, y1=0, x2=400, y2=280)),
        ("ltr", ConnectionPoints(x1=200, y1=40, x2=300, y2=240)),
        ("rtl", ConnectionPoints(x1=0, y1=40, x2=500, y2=240)),
    ],
)
def test_connection_points_follow_orientation(
    orientation: str, expected: ConnectionPoints
) -> None:
    assert calculate_connection_points(SOURCE, TARGET, orientation) == expected  # type: ignore[arg-type]


def test_view_box_pads_bounding_box() -> None:
    graph = build_block_graph([make_block("A"), make_block("B")])
    positioned = [
        PositionedBlock(block=graph.blocks["A"], position=SOURCE),
        PositionedBlock(block=graph.blocks["B"], position=TARGET),
    ]

    assert calculate_view_box(positioned) == ViewBox(x=-40, y=-40, width=580, height=360)
    assert calculate_view_box(positioned, padding=0) == ViewBox(x=0, y=0, width=500, height=280)


def test_empty_view_box_uses_default() -> None:
    assert calculate_view_box([]) == DEFAULT_VIEW_BOX
    assert DEFAULT_VIEW_BOX.to_dict() == {"x": 0.0, "y": 0.0, "width": 800.0, "height": 600.0}
