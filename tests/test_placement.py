"""Tests for drag-and-drop placement and the edit helpers built on it."""

from __future__ import annotations

import pytest

from blockgrid.core.contracts.block import Block, Position, TextBlock
from blockgrid.core.errors import IndexOutOfRangeError, NotFoundError
from blockgrid.layout.edits import append_block, move_block, remove_block
from blockgrid.layout.normalizer import normalize
from blockgrid.layout.placement import place

L, R, F = Position.LEFT, Position.RIGHT, Position.FULL


def _b(block_id: str, row: int, position: Position, order: int) -> TextBlock:
    return TextBlock(id=block_id, row=row, position=position, order=order)


def _slots(blocks: list[Block]) -> dict[str | None, tuple[int, Position]]:
    return {b.id: b.slot for b in blocks}


def _layout(blocks: list[Block]) -> list[tuple[str | None, int, Position, int]]:
    return [(b.id, b.row, b.position, b.order) for b in blocks]


@pytest.fixture  # type: ignore[misc]
def grid() -> list[Block]:
    """Row 0: a|b, row 1: c (full), row 2: d (left)."""
    return [_b("a", 0, L, 0), _b("b", 0, R, 1), _b("c", 1, F, 2), _b("d", 2, L, 3)]


def test_noop_when_already_in_place(grid: list[Block]) -> None:
    assert place(grid, "b", 0, R) == grid
    assert place(grid, "c", 1, "full") == grid


def test_full_target_evicts_row(grid: list[Block]) -> None:
    """End-to-end: B spans row 0, A is evicted to a new full row."""
    blocks = grid[:2]
    placed = place(blocks, "b", 0, F)
    assert _slots(placed) == {"b": (0, F), "a": (1, F)}
    assert _layout(normalize(placed)) == [("b", 0, F, 0), ("a", 1, F, 1)]


def test_full_target_evicts_every_occupant_to_its_own_row(grid: list[Block]) -> None:
    placed = place(grid, "d", 0, F)
    assert _slots(placed) == {
        "a": (3, F),
        "b": (4, F),
        "c": (1, F),
        "d": (0, F),
    }
    assert _slots(normalize(placed)) == {
        "d": (0, F),
        "c": (1, F),
        "a": (2, F),
        "b": (3, F),
    }


def test_side_target_swaps_with_full_block(grid: list[Block]) -> None:
    placed = place(grid, "a", 1, R)
    assert _slots(placed)["a"] == (1, R)
    assert _slots(placed)["c"] == (0, L)
    assert _slots(placed)["b"] == (0, R)


def test_side_target_swaps_with_occupant(grid: list[Block]) -> None:
    placed = place(grid, "d", 0, R)
    assert _slots(placed)["d"] == (0, R)
    assert _slots(placed)["b"] == (2, L)
    assert len(normalize(placed)) == len(grid)


def test_swap_within_the_same_row(grid: list[Block]) -> None:
    placed = place(grid, "a", 0, R)
    assert _slots(placed)["a"] == (0, R)
    assert _slots(placed)["b"] == (0, L)


def test_side_target_moves_into_empty_slot(grid: list[Block]) -> None:
    placed = place(grid, "b", 2, R)
    assert _slots(placed) == {"a": (0, L), "b": (2, R), "c": (1, F), "d": (2, L)}


def test_full_block_moving_to_side_of_own_row(grid: list[Block]) -> None:
    placed = place(grid, "c", 1, L)
    assert _slots(placed)["c"] == (1, L)


def test_drop_onto_new_trailing_row(grid: list[Block]) -> None:
    out = move_block(grid, "a", 3, L)
    assert _layout(out) == [("b", 0, R, 0), ("c", 1, F, 1), ("d", 2, L, 2), ("a", 3, L, 3)]


def test_place_does_not_mutate_input(grid: list[Block]) -> None:
    snapshot = list(grid)
    place(grid, "d", 0, F)
    assert grid == snapshot


@pytest.mark.parametrize(("row", "position"), [(-1, "left"), (4, "left"), (0, "middle"), (0, 5)])
def test_invalid_targets_raise(grid: list[Block], row: int, position: object) -> None:
    with pytest.raises(IndexOutOfRangeError):
        place(grid, "a", row, position)  # type: ignore[arg-type]


def test_unknown_block_raises(grid: list[Block]) -> None:
    with pytest.raises(NotFoundError):
        place(grid, "zzz", 0, L)


@pytest.mark.parametrize(
    ("moving", "row", "position"),
    [("a", 1, L), ("c", 0, R), ("d", 1, F), ("b", 3, R), ("c", 2, R)],
)
def test_move_keeps_count_and_invariants(
    grid: list[Block], moving: str, row: int, position: Position
) -> None:
    out = move_block(grid, moving, row, position)
    assert sorted(b.id or "" for b in out) == ["a", "b", "c", "d"]
    assert [b.order for b in out] == list(range(4))
    assert normalize(out) == out


def test_append_block_adds_full_trailing_row(grid: list[Block]) -> None:
    out = append_block(grid, TextBlock(rich_text="draft", position=L, row=0))
    draft = out[-1]
    assert draft.id is None
    assert (draft.row, draft.position, draft.order) == (3, F, 4)


def test_remove_block_closes_gap(grid: list[Block]) -> None:
    out = remove_block(grid, "c")
    assert _layout(out) == [("a", 0, L, 0), ("b", 0, R, 1), ("d", 1, L, 2)]
    with pytest.raises(NotFoundError):
        remove_block(grid, "c-missing")
