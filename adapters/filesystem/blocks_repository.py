from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, List

import orjson
from pydantic import TypeAdapter, ValidationError

from adapters.filesystem.json_utils import load_json, write_json_atomic
from domain.errors import InvalidBlockSchemaError
from domain.models import Block
from domain.ports.repositories import BlocksRepository

_BLOCK_LIST_ADAPTER = TypeAdapter(List[Block])


class FileSystemBlocksRepository(BlocksRepository):
    def load(self, path: Path) -> List[Block]:
        try:
            payload = load_json(path)
        except orjson.JSONDecodeError as exc:
            msg = f"Invalid JSON in {path}: {exc}"
            raise InvalidBlockSchemaError(msg) from exc
        return parse_blocks(payload, source=str(path))

    def save(self, blocks: Sequence[Block], path: Path) -> None:
        write_json_atomic(path, list(blocks))


def parse_blocks(payload: Any, source: str = "payload") -> List[Block]:
    if isinstance(payload, dict):
        payload = payload.get("blocks")
    if not isinstance(payload, list):
        msg = f"Expected a list of blocks in {source}"
        raise InvalidBlockSchemaError(msg)
    try:
        return _BLOCK_LIST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        msg = f"Invalid block schema in {source}"
        raise InvalidBlockSchemaError(msg, validation_errors=str(exc)) from exc
