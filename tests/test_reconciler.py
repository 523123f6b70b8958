"""Tests for full-replacement block reconciliation."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest

from blockgrid.core.contracts.block import (
    NIL_ID,
    Block,
    ChecklistBlock,
    ChecklistItem,
    CodeBlock,
    ImageBlock,
    Position,
    TextBlock,
)
from blockgrid.core.errors import ConflictError, NotFoundError, TypeMismatchError
from blockgrid.sync.reconciler import reconcile

L, R, F = Position.LEFT, Position.RIGHT, Position.FULL


def _ids_from(*values: str) -> Callable[[], str]:
    it: Iterator[str] = iter(values)
    return lambda: next(it)


@pytest.fixture  # type: ignore[misc]
def existing() -> dict[str, Block]:
    return {
        "A": TextBlock(id="A", row=0, position=L, order=0, rich_text="alpha"),
        "B": TextBlock(id="B", row=0, position=R, order=1, rich_text="beta"),
    }


def test_new_placeholder_block_is_added(existing: dict[str, Block]) -> None:
    incoming = [*existing.values(), CodeBlock(row=1, order=2, content="x")]
    changes = reconcile(existing, incoming, id_factory=_ids_from("N1"))

    assert [b.id for b in changes.to_add] == ["N1"]
    assert isinstance(changes.to_add[0], CodeBlock)
    assert changes.to_remove == []
    assert changes.to_update == []
    assert changes.unchanged == ["A", "B"]


@pytest.mark.parametrize("placeholder", [None, "", "  ", NIL_ID])
def test_every_placeholder_form_means_add(existing: dict[str, Block], placeholder: str | None) -> None:
    changes = reconcile(existing, [TextBlock(id=placeholder)], id_factory=_ids_from("fresh"))
    assert [b.id for b in changes.to_add] == ["fresh"]


def test_missing_block_is_removed(existing: dict[str, Block]) -> None:
    changes = reconcile(existing, [existing["A"]])
    assert [b.id for b in changes.to_remove] == ["B"]
    assert changes.to_add == []


def test_empty_submission_removes_everything_in_stored_order(existing: dict[str, Block]) -> None:
    changes = reconcile(existing, [])
    assert [b.id for b in changes.to_remove] == ["A", "B"]


def test_layout_change_is_an_update(existing: dict[str, Block]) -> None:
    moved = existing["B"].with_layout(0, F, order=0)
    changes = reconcile(existing, [moved])

    (updated,) = changes.to_update
    assert updated.id == "B"
    assert updated.slot == (0, F) and updated.order == 0
    assert [b.id for b in changes.to_remove] == ["A"]


def test_payload_applied_when_type_matches() -> None:
    stored: dict[str, Block] = {
        "I": ImageBlock(id="I", url="https://a/1.png", caption="old"),
        "K": ChecklistBlock(id="K", items=(ChecklistItem(text="t"),)),
    }
    incoming: list[Block] = [
        ImageBlock(id="I", url="https://a/2.png", caption="new"),
        ChecklistBlock(id="K", items=(ChecklistItem(text="t", done=True),)),
    ]
    changes = reconcile(stored, incoming)
    image, checklist = changes.to_update
    assert isinstance(image, ImageBlock) and image.url == "https://a/2.png"
    assert isinstance(checklist, ChecklistBlock) and checklist.items[0].done is True


def test_duplicate_ids_conflict(existing: dict[str, Block]) -> None:
    incoming = [existing["A"], existing["A"].with_layout(1, F)]
    with pytest.raises(ConflictError) as info:
        reconcile(existing, incoming)
    assert info.value.duplicate_ids == ("A",)


def test_duplicate_placeholders_are_not_a_conflict(existing: dict[str, Block]) -> None:
    changes = reconcile(existing, [TextBlock(), TextBlock()], id_factory=_ids_from("n1", "n2"))
    assert [b.id for b in changes.to_add] == ["n1", "n2"]


def test_type_mismatch_is_rejected(existing: dict[str, Block]) -> None:
    incoming: list[Block] = [CodeBlock(id="A", content="print()"), existing["B"]]
    with pytest.raises(TypeMismatchError) as info:
        reconcile(existing, incoming)
    assert (info.value.existing_type, info.value.incoming_type) == ("text", "code")


def test_unknown_id_added_when_implicit_create_allowed(existing: dict[str, Block]) -> None:
    changes = reconcile(existing, [*existing.values(), TextBlock(id="X")])
    assert [b.id for b in changes.to_add] == ["X"]


def test_unknown_id_rejected_when_implicit_create_forbidden(existing: dict[str, Block]) -> None:
    with pytest.raises(NotFoundError):
        reconcile(existing, [TextBlock(id="X")], allow_implicit_create=False)


def test_generated_id_collision_is_a_conflict(existing: dict[str, Block]) -> None:
    with pytest.raises(ConflictError):
        reconcile(existing, [TextBlock()], id_factory=_ids_from("A"))


def test_decisions_do_not_depend_on_incoming_order(existing: dict[str, Block]) -> None:
    a = existing["A"].with_layout(1, F)
    b = existing["B"].with_layout(0, F)
    forward = reconcile(existing, [a, b])
    backward = reconcile(existing, [b, a])
    assert {x.id for x in forward.to_update} == {x.id for x in backward.to_update} == {"A", "B"}
    assert forward.to_remove == backward.to_remove == []


def test_inputs_are_left_untouched(existing: dict[str, Block]) -> None:
    snapshot = dict(existing)
    incoming = [existing["A"].with_layout(2, F)]
    reconcile(existing, incoming)
    assert existing == snapshot
    assert incoming[0].slot == (2, F)


def test_resubmitted_block_is_unchanged_not_updated(existing: dict[str, Block]) -> None:
    changes = reconcile(existing, [existing["A"], existing["B"].with_layout(1, F)])
    assert changes.unchanged == ["A"]
    assert [b.id for b in changes.to_update] == ["B"]
