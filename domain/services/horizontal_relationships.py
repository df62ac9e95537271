from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

from domain.errors import SelfLoopError
from domain.models import EDGE_PREREQUISITE

if TYPE_CHECKING:
    from domain.models import Block, BlockGraph

_WHITE = 0
_GRAY = 1
_BLACK = 2


class HorizontalRelationships:
    """Bidirectional prerequisite/post-requisite index over block ids.

    If A is a prerequisite of B then ``prerequisites[B]`` contains A and
    ``postrequisites[A]`` contains B. Transitive queries are memoized and the
    memo is dropped on every mutation.
    """

    def __init__(self) -> None:
        self._prerequisites: dict[str, set[str]] = {}
        self._postrequisites: dict[str, set[str]] = {}
        self._all_prerequisites_cache: dict[str, frozenset[str]] = {}
        self._all_postrequisites_cache: dict[str, frozenset[str]] = {}

    @classmethod
    def from_blocks(cls, blocks: Iterable[Block]) -> HorizontalRelationships:
        relationships = cls()
        for block in blocks:
            relationships._ensure_block(block.id)
            for prerequisite_id in block.prerequisites:
                relationships.add_relationship(prerequisite_id, block.id)
        return relationships

    @classmethod
    def from_graph(cls, graph: BlockGraph) -> HorizontalRelationships:
        relationships = cls()
        for block_id in graph.blocks:
            relationships._ensure_block(block_id)
        for edge in graph.edges:
            if edge.edge_type != EDGE_PREREQUISITE:
                continue
            relationships.add_relationship(edge.source, edge.target)
        return relationships

    def _ensure_block(self, block_id: str) -> None:
        self._prerequisites.setdefault(block_id, set())
        self._postrequisites.setdefault(block_id, set())

    def add_relationship(self, prerequisite_id: str, dependent_id: str) -> None:
        if prerequisite_id == dependent_id:
            raise SelfLoopError(prerequisite_id)
        self._ensure_block(prerequisite_id)
        self._ensure_block(dependent_id)
        self._prerequisites[dependent_id].add(prerequisite_id)
        self._postrequisites[prerequisite_id].add(dependent_id)
        self._clear_caches()

    def remove_relationship(self, prerequisite_id: str, dependent_id: str) -> None:
        self._prerequisites.get(dependent_id, set()).discard(prerequisite_id)
        self._postrequisites.get(prerequisite_id, set()).discard(dependent_id)
        self._clear_caches()

    def remove_block(self, block_id: str) -> None:
        for prerequisite_id in self._prerequisites.get(block_id, set()):
            self._postrequisites.get(prerequisite_id, set()).discard(block_id)
        for dependent_id in self._postrequisites.get(block_id, set()):
            self._prerequisites.get(dependent_id, set()).discard(block_id)
        self._prerequisites.pop(block_id, None)
        self._postrequisites.pop(block_id, None)
        self._clear_caches()

    def get_prerequisites(self, block_id: str) -> frozenset[str]:
        return frozenset(self._prerequisites.get(block_id, ()))

    def get_postrequisites(self, block_id: str) -> frozenset[str]:
        return frozenset(self._postrequisites.get(block_id, ()))

    def has_prerequisite(self, block_id: str, prerequisite_id: str) -> bool:
        return prerequisite_id in self._prerequisites.get(block_id, ())

    def has_postrequisite(self, block_id: str, postrequisite_id: str) -> bool:
        return postrequisite_id in self._postrequisites.get(block_id, ())

    def get_all_prerequisites(self, block_id: str) -> frozenset[str]:
        cached = self._all_prerequisites_cache.get(block_id)
        if cached is None:
            cached = _reachable(block_id, self._prerequisites)
            self._all_prerequisites_cache[block_id] = cached
        return cached

    def get_all_postrequisites(self, block_id: str) -> frozenset[str]:
        cached = self._all_postrequisites_cache.get(block_id)
        if cached is None:
            cached = _reachable(block_id, self._postrequisites)
            self._all_postrequisites_cache[block_id] = cached
        return cached

    def has_path(self, source_id: str, target_id: str) -> bool:
        if source_id == target_id:
            return True
        return target_id in self.get_all_postrequisites(source_id)

    def detect_cycles(self) -> list[list[str]] | None:
        color: dict[str, int] = {block_id: _WHITE for block_id in self._postrequisites}
        parent: dict[str, str | None] = {block_id: None for block_id in self._postrequisites}
        cycles: list[list[str]] = []

        for start in self._postrequisites:
            if color[start] != _WHITE:
                continue
            color[start] = _GRAY
            stack: list[tuple[str, Iterator[str]]] = [
                (start, iter(sorted(self._postrequisites[start])))
            ]
            while stack:
                node, neighbors = stack[-1]
                advanced = False
                for neighbor in neighbors:
                    state = color.get(neighbor, _WHITE)
                    if state == _GRAY:
                        cycles.append(_rebuild_cycle(node, neighbor, parent))
                    elif state == _WHITE:
                        parent[neighbor] = node
                        color[neighbor] = _GRAY
                        stack.append(
                            (neighbor, iter(sorted(self._postrequisites.get(neighbor, ()))))
                        )
                        advanced = True
                        break
                if not advanced:
                    color[node] = _BLACK
                    stack.pop()

        return cycles or None

    def get_topological_order(self) -> list[str] | None:
        in_degree = {
            block_id: len(prerequisites) for block_id, prerequisites in self._prerequisites.items()
        }
        queue = deque(block_id for block_id, degree in in_degree.items() if degree == 0)
        order: list[str] = []
        while queue:
            block_id = queue.popleft()
            order.append(block_id)
            for dependent_id in sorted(self._postrequisites.get(block_id, ())):
                in_degree[dependent_id] -= 1
                if in_degree[dependent_id] == 0:
                    queue.append(dependent_id)

        if len(order) != self.get_block_count():
            return None
        return order

    def get_all_blocks(self) -> frozenset[str]:
        return frozenset(self._prerequisites)

    def get_block_count(self) -> int:
        return len(self._prerequisites)

    def get_relationship_count(self) -> int:
        return sum(len(prerequisites) for prerequisites in self._prerequisites.values())

    def clear(self) -> None:
        self._prerequisites.clear()
        self._postrequisites.clear()
        self._clear_caches()

    def _clear_caches(self) -> None:
        self._all_prerequisites_cache.clear()
        self._all_postrequisites_cache.clear()

    def __str__(self) -> str:
        lines = [
            f"HorizontalRelationships ({self.get_block_count()} blocks, "
            f"{self.get_relationship_count()} relationships)"
        ]
        for block_id in self._prerequisites:
            lines.append(f"  {block_id}:")
            prerequisites = sorted(self._prerequisites[block_id])
            postrequisites = sorted(self._postrequisites.get(block_id, ()))
            if prerequisites:
                lines.append(f"    Prerequisites: [{', '.join(prerequisites)}]")
            if postrequisites:
                lines.append(f"    Post-requisites: [{', '.join(postrequisites)}]")
        return "\n".join(lines)


def _reachable(start: str, adjacency: Mapping[str, set[str]]) -> frozenset[str]:
    reached: set[str] = set()
    stack = list(adjacency.get(start, ()))
    while stack:
        node = stack.pop()
        if node in reached:
            continue
        reached.add(node)
        stack.extend(adjacency.get(node, set()) - reached)
    return frozenset(reached)


def _rebuild_cycle(node: str, back_target: str, parent: Mapping[str, str | None]) -> list[str]:
    cycle = [back_target]
    current: str | None = node
    while current is not None and current != back_target:
        cycle.insert(0, current)
        current = parent.get(current)
    cycle.insert(0, back_target)
    return cycle
