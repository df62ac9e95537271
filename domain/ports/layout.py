from __future__ import annotations

from typing import Protocol

from domain.models import BlockGraph, LayoutPlan, Orientation


class LayoutEngine(Protocol):
    @property
    def orientation(self) -> Orientation: ...

    def build_plan(self, graph: BlockGraph) -> LayoutPlan:
        ...
