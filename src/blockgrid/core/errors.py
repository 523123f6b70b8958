"""Error taxonomy for layout and reconciliation failures.

All errors are local, synchronous validation failures. They derive from
:class:`ValueError` so generic callers (and the API's ``ValueError`` handler)
treat them as bad input; the API maps each subclass to its own status code.

- :class:`ConflictError`: duplicate non-placeholder ids in a submitted list.
- :class:`NotFoundError`: an id references no existing block (or task).
- :class:`TypeMismatchError`: an update tries to change a block's variant.
- :class:`IndexOutOfRangeError`: a placement target is outside the grid.
"""

from __future__ import annotations

from collections.abc import Iterable


class BlockGridError(ValueError):
    """Base class for all BlockGrid domain errors."""


class ConflictError(BlockGridError):
    """Raised when a submitted block list repeats a non-placeholder id."""

    def __init__(self, duplicate_ids: Iterable[str]) -> None:
        self.duplicate_ids: tuple[str, ...] = tuple(sorted(set(duplicate_ids)))
        super().__init__(f"Duplicate block ids in submission: {', '.join(self.duplicate_ids)}")


class NotFoundError(BlockGridError):
    """Raised when an id does not reference an existing entity."""

    def __init__(self, entity_id: str, *, kind: str = "block") -> None:
        self.entity_id = entity_id
        self.kind = kind
        super().__init__(f"{kind.capitalize()} with id {entity_id!r} not found")


class TypeMismatchError(BlockGridError):
    """Raised when an update would change a block's variant tag in place."""

    def __init__(self, block_id: str, existing_type: str, incoming_type: str) -> None:
        self.block_id = block_id
        self.existing_type = existing_type
        self.incoming_type = incoming_type
        super().__init__(
            f"Block {block_id!r} is of type {existing_type!r} and cannot become {incoming_type!r}"
        )


class IndexOutOfRangeError(BlockGridError):
    """Raised when a placement target row or position is invalid."""


__all__ = [
    "BlockGridError",
    "ConflictError",
    "NotFoundError",
    "TypeMismatchError",
    "IndexOutOfRangeError",
]
