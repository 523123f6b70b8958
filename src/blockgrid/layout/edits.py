"""Edit-surface helpers: every edit ends with a normalized layout.

These wrap the placement and normalization primitives the way an editor uses
them: drag a block, add a draft block, delete a block. Each helper returns a
new, normalized list ready to render or to submit for persistence.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from blockgrid.core.contracts.block import BlockBase, Position
from blockgrid.core.errors import NotFoundError

from .normalizer import normalize
from .placement import place

B = TypeVar("B", bound=BlockBase)


def move_block(
    blocks: Sequence[B],
    moving_id: str,
    target_row: int,
    target_position: Position | str,
) -> list[B]:
    """Place ``moving_id`` at the target slot, then normalize."""
    return normalize(place(blocks, moving_id, target_row, target_position))


def append_block(blocks: Sequence[B], block: B) -> list[B]:
    """Add ``block`` on a new trailing row spanning the full width."""
    next_row = max((b.row for b in blocks), default=-1) + 1
    next_order = max((b.order for b in blocks), default=-1) + 1
    return normalize([*blocks, block.with_layout(next_row, Position.FULL, next_order)])


def remove_block(blocks: Sequence[B], block_id: str) -> list[B]:
    """Drop the block with ``block_id`` and close the gap it leaves."""
    remaining = [b for b in blocks if b.id != block_id]
    if len(remaining) == len(blocks):
        raise NotFoundError(block_id)
    return normalize(remaining)


__all__ = ["append_block", "move_block", "remove_block"]
