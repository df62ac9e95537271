from __future__ import annotations

from collections.abc import Sequence

from domain.models import BlockPosition, ConnectionPoints, Orientation, PositionedBlock, ViewBox

DEFAULT_VIEW_BOX = ViewBox(0.0, 0.0, 800.0, 600.0)
VIEW_BOX_PADDING = 40.0


def calculate_connection_points(
    from_rect: BlockPosition,
    to_rect: BlockPosition,
    orientation: Orientation,
) -> ConnectionPoints:
    if orientation == "btt":
        return ConnectionPoints(
            x1=from_rect.x + from_rect.width / 2,
            y1=from_rect.y,
            x2=to_rect.x + to_rect.width / 2,
            y2=to_rect.y + to_rect.height,
        )
    if orientation == "ltr":
        return ConnectionPoints(
            x1=from_rect.x + from_rect.width,
            y1=from_rect.y + from_rect.height / 2,
            x2=to_rect.x,
            y2=to_rect.y + to_rect.height / 2,
        )
    if orientation == "rtl":
        return ConnectionPoints(
            x1=from_rect.x,
            y1=from_rect.y + from_rect.height / 2,
            x2=to_rect.x + to_rect.width,
            y2=to_rect.y + to_rect.height / 2,
        )
    return ConnectionPoints(
        x1=from_rect.x + from_rect.width / 2,
        y1=from_rect.y + from_rect.height,
        x2=to_rect.x + to_rect.width / 2,
        y2=to_rect.y,
    )


def calculate_view_box(
    positioned: Sequence[PositionedBlock], padding: float = VIEW_BOX_PADDING
) -> ViewBox:
    if not positioned:
        return DEFAULT_VIEW_BOX

    min_x = min(item.position.x for item in positioned)
    min_y = min(item.position.y for item in positioned)
    max_x = max(item.position.x + item.position.width for item in positioned)
    max_y = max(item.position.y + item.position.height for item in positioned)
    return ViewBox(
        x=min_x - padding,
        y=min_y - padding,
        width=max_x - min_x + 2 * padding,
        height=max_y - min_y + 2 * padding,
    )
