from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from domain.models import Block


class BlocksRepository(Protocol):
    def load(self, path: Path) -> Sequence[Block]: ...

    def save(self, blocks: Sequence[Block], path: Path) -> None: ...


class LayoutRepository(Protocol):
    def load(self, path: Path) -> dict[str, Any]: ...

    def save(self, payload: Mapping[str, Any], path: Path) -> None: ...
