"""
Placement resolution for drag-and-drop moves.

:func:`place` computes the effect of moving one block to a target grid slot
``(target_row, target_position)``:

- **Already there**: nothing changes.
- **Target is ``full``**: the block takes ``(target_row, full)``; every other
  block in that row is evicted to its own new row after the current maximum
  row, forced to ``full``.
- **Target is ``left``/``right``**:
    - a ``full`` block in the target row swaps with the moving block (it takes
      the mover's original ``(row, position)``);
    - otherwise a block in the exact slot swaps ``(row, position)`` with it;
    - otherwise the block simply moves into the empty slot.

The result is *pre-normalization*: placement can leave empty rows, overflow
or stale ``order`` values. Callers pipe it through
:func:`~blockgrid.layout.normalizer.normalize` (see
:func:`~blockgrid.layout.edits.move_block`).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from blockgrid.core.contracts.block import BlockBase, Position, parse_position
from blockgrid.core.errors import IndexOutOfRangeError, NotFoundError
from blockgrid.core.settings import get_logger

logger = get_logger(__name__)

B = TypeVar("B", bound=BlockBase)


def _validate_target(blocks: Sequence[B], target_row: Any, target_position: Any) -> Position:
    """Check the target slot and return the parsed position.

    Valid rows are ``0..max_row + 1``; one past the last row lets a block be
    dropped onto a new trailing row.
    """
    try:
        position = parse_position(target_position)
    except ValueError as exc:
        raise IndexOutOfRangeError(f"Invalid target position: {target_position!r}") from exc

    if isinstance(target_row, bool) or not isinstance(target_row, int):
        raise IndexOutOfRangeError(f"Target row must be an integer, got {target_row!r}")
    max_row = max((b.row for b in blocks), default=-1)
    if not 0 <= target_row <= max_row + 1:
        raise IndexOutOfRangeError(f"Target row {target_row} outside 0..{max_row + 1}")
    return position


def place(
    blocks: Sequence[B],
    moving_id: str,
    target_row: int,
    target_position: Position | str,
) -> list[B]:
    """Move block ``moving_id`` to ``(target_row, target_position)``.

    Parameters
    ----------
    blocks : Sequence[B]
        Current layout; not modified.
    moving_id : str
        Id of the dragged block.
    target_row : int
        Destination row, ``0..max_row + 1``.
    target_position : Position | str
        Destination slot (``left``, ``right`` or ``full``).

    Returns
    -------
    list[B]
        New layout, not yet normalized.

    Raises
    ------
    NotFoundError
        If no block has id ``moving_id``.
    IndexOutOfRangeError
        If the target row or position is outside the grid.
    """
    position = _validate_target(blocks, target_row, target_position)
    index = next((i for i, b in enumerate(blocks) if b.id == moving_id), None)
    if index is None:
        raise NotFoundError(moving_id)

    moving = blocks[index]
    result = list(blocks)
    if moving.slot == (target_row, position):
        return result

    origin_row, origin_position = moving.slot
    result[index] = moving.with_layout(target_row, position)

    if position is Position.FULL:
        next_row = max(b.row for b in blocks) + 1
        for i, block in enumerate(blocks):
            if i != index and block.row == target_row:
                logger.debug("Evicting block %r from row %d to row %d", block.id, target_row, next_row)
                result[i] = block.with_layout(next_row, Position.FULL)
                next_row += 1
        return result

    occupant = next(
        (
            i
            for i, b in enumerate(blocks)
            if i != index and b.row == target_row and b.position is Position.FULL
        ),
        None,
    )
    if occupant is None:
        occupant = next(
            (i for i, b in enumerate(blocks) if i != index and b.slot == (target_row, position)),
            None,
        )
    if occupant is not None:
        logger.debug(
            "Swapping block %r into (%d, %s)", blocks[occupant].id, origin_row, origin_position.value
        )
        result[occupant] = blocks[occupant].with_layout(origin_row, origin_position)
    return result


__all__ = ["place"]
