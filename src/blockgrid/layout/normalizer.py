"""
Layout normalization.

:func:`normalize` repairs a block collection after any edit so that:

1. every row holds either one ``full`` block, or at most one ``left`` and one
   ``right`` block;
2. rows in use are exactly ``0..n-1``;
3. ``order`` follows the visual sequence (rows ascending; within a row
   ``left``, ``right``, ``full``), numbered ``0..len-1``.

Algorithm
---------
- Stable-sort by ``order``, bucket by ``row``.
- Walk rows ascending. A row with a ``full`` block keeps the first one; with
  none, it keeps the first ``left`` and the first ``right``. Every other block
  of the row overflows to its own fresh row (allocated from ``max(row) + 1``)
  as ``full``.
- Compact rows, then renumber ``order`` in emitted sequence.

The transform is idempotent: a normalized collection has no overflow, its
rows are already compact and its orders already sequential.

Only the shared layout fields are read; the block variant never matters here.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import TypeVar

from blockgrid.core.contracts.block import BlockBase, Position
from blockgrid.core.settings import get_logger

logger = get_logger(__name__)

B = TypeVar("B", bound=BlockBase)


def _split_row(bucket: list[B]) -> tuple[list[B], list[B]]:
    """Split one row's blocks (already in order) into kept and overflow."""
    kept: list[B] = []
    overflow: list[B] = []
    has_full = any(b.position is Position.FULL for b in bucket)
    taken: set[Position] = set()
    for block in bucket:
        if has_full:
            wanted = block.position is Position.FULL and not taken
        else:
            wanted = block.position not in taken
        if wanted:
            taken.add(block.position)
            kept.append(block)
        else:
            overflow.append(block)
    return kept, overflow


def _relayout(block: B, row: int, position: Position, order: int) -> B:
    if block.row == row and block.position is position and block.order == order:
        return block
    return block.with_layout(row, position, order)


def normalize(blocks: Iterable[B]) -> list[B]:
    """Return a conflict-free, compacted and renumbered copy of ``blocks``.

    Parameters
    ----------
    blocks : Iterable[B]
        Any block collection; it is not modified.

    Returns
    -------
    list[B]
        Blocks in visual order with repaired ``row``, ``position`` and
        ``order``. Blocks whose layout is already correct are returned as-is.
    """
    ordered = sorted(blocks, key=lambda b: b.order)
    if not ordered:
        return []

    buckets: dict[int, list[B]] = defaultdict(list)
    for block in ordered:
        buckets[block.row].append(block)

    next_overflow_row = max(buckets) + 1
    slots: list[tuple[B, int, Position]] = []
    for row in sorted(buckets):
        kept, overflow = _split_row(buckets[row])
        slots.extend((block, row, block.position) for block in kept)
        for block in overflow:
            logger.debug(
                "Row %d overflow: block %r moved to row %d as full",
                row,
                block.id,
                next_overflow_row,
            )
            slots.append((block, next_overflow_row, Position.FULL))
            next_overflow_row += 1

    compact = {old: new for new, old in enumerate(sorted({row for _, row, _ in slots}))}
    slots = [(block, compact[row], position) for block, row, position in slots]
    slots.sort(key=lambda slot: (slot[1], slot[2].rank))

    return [
        _relayout(block, row, position, order)
        for order, (block, row, position) in enumerate(slots)
    ]


__all__ = ["normalize"]
