from __future__ import annotations

from collections.abc import Sequence


class DuplicateBlockIdError(ValueError):
    def __init__(self, duplicate_ids: Sequence[str]) -> None:
        self.duplicate_ids = list(duplicate_ids)
        super().__init__(f"Duplicate block IDs detected: {', '.join(self.duplicate_ids)}")


class SelfLoopError(ValueError):
    def __init__(self, block_id: str) -> None:
        self.block_id = block_id
        super().__init__(
            f"Cannot add self-loop: block {block_id} cannot be its own prerequisite"
        )


class InvalidBlockSchemaError(ValueError):
    def __init__(self, message: str, validation_errors: str | None = None) -> None:
        self.validation_errors = validation_errors
        super().__init__(message)
