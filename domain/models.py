from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from domain.services.horizontal_relationships import HorizontalRelationships

EdgeType = Literal["prerequisite", "parent"]
Orientation = Literal["ttb", "ltr", "rtl", "btt"]

EDGE_PREREQUISITE: EdgeType = "prerequisite"
EDGE_PARENT: EdgeType = "parent"
ORIENTATIONS: Tuple[str, ...] = ("ttb", "ltr", "rtl", "btt")
DEFAULT_ORIENTATION: Orientation = "ttb"


def is_valid_orientation(value: object) -> bool:
    return isinstance(value, str) and value in ORIENTATIONS


class BlockTitle(BaseModel):
    model_config = ConfigDict(frozen=True)

    he: str
    en: str


class Block(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., min_length=1)
    title: BlockTitle
    prerequisites: List[str] = Field(default_factory=list)
    parents: List[str] = Field(default_factory=list)

    @property
    def extensions(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    @property
    def is_sub_block(self) -> bool:
        return len(self.parents) > 0

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    edge_type: EdgeType

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.source, "to": self.target, "type": self.edge_type}


@dataclass
class BlockGraph:
    blocks: Dict[str, Block]
    edges: List[GraphEdge]
    relationships: Optional[HorizontalRelationships] = None

    def edges_of_type(self, edge_type: EdgeType) -> List[GraphEdge]:
        return [edge for edge in self.edges if edge.edge_type == edge_type]


@dataclass(frozen=True)
class BlockPosition:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class PositionedBlock:
    block: Block
    position: BlockPosition


@dataclass(frozen=True)
class LayoutPlan:
    positions: Dict[str, BlockPosition]
    levels: Dict[str, int]
    positioned: List[PositionedBlock]


@dataclass(frozen=True)
class SiblingGroup:
    signature: str
    siblings: List[str]
    centroid: float


@dataclass(frozen=True)
class CategorizedBlocks:
    visible: Set[str] = field(default_factory=set)
    dimmed: Set[str] = field(default_factory=set)

    def is_rendered(self, block_id: str) -> bool:
        return block_id in self.visible or block_id in self.dimmed


@dataclass(frozen=True)
class ConnectionPoints:
    x1: float
    y1: float
    x2: float
    y2: float

    def to_dict(self) -> Dict[str, float]:
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}


@dataclass(frozen=True)
class ViewBox:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class SelectionState:
    navigation_stack: Tuple[str, ...] = ()

    @classmethod
    def from_selected(cls, block_id: str | None) -> SelectionState:
        return cls((block_id,)) if block_id else cls()

    @property
    def selected_block_id(self) -> str | None:
        return self.navigation_stack[-1] if self.navigation_stack else None

    @property
    def selection_level(self) -> int:
        return len(self.navigation_stack)

    def push(self, block_id: str) -> SelectionState:
        return SelectionState((*self.navigation_stack, block_id))

    def pop(self) -> SelectionState:
        return SelectionState(self.navigation_stack[:-1])


@dataclass(frozen=True)
class BlockSelectedEvent:
    block_id: str | None
    selection_level: int
    navigation_stack: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_id": self.block_id,
            "selection_level": self.selection_level,
            "navigation_stack": list(self.navigation_stack),
        }


@dataclass(frozen=True)
class NavigationResult:
    should_render: bool
    state: SelectionState
    event: BlockSelectedEvent | None = None
