"""Tests for the block, task and change-set contracts."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from blockgrid.core.contracts.block import (
    BLOCK_ADAPTER,
    NIL_ID,
    ChecklistBlock,
    CodeBlock,
    ChecklistItem,
    ImageBlock,
    MAX_PAYLOAD_LENGTH,
    Position,
    TextBlock,
    check_persistable,
    dump_blocks,
    is_placeholder_id,
    parse_position,
)
from blockgrid.core.contracts.changeset import BlockChangeSet
from blockgrid.core.contracts.task import Task, TaskCreate, TaskUpdate


def test_discriminated_union_picks_variant_from_wire_shape() -> None:
    block = BLOCK_ADAPTER.validate_python(
        {
            "id": "c1",
            "type": "checklist",
            "row": 2,
            "position": "left",
            "order": 4,
            "items": [{"text": "buy milk", "done": True}],
        }
    )
    assert isinstance(block, ChecklistBlock)
    assert block.slot == (2, Position.LEFT)
    assert block.items[0].done is True


def test_camel_case_aliases_round_trip_to_wire() -> None:
    text = TextBlock.model_validate({"id": "t1", "richText": '{"ops":[]}'})
    assert text.rich_text == '{"ops":[]}'
    # snake_case is accepted too
    assert TextBlock(rich_text="x").rich_text == "x"

    wire = dump_blocks([text])[0]
    assert wire["richText"] == '{"ops":[]}'
    assert wire["position"] == "full"
    assert wire["type"] == "text"


def test_position_accepts_codes_and_case_on_input() -> None:
    assert TextBlock(position=0).position is Position.LEFT
    assert TextBlock(position="1").position is Position.RIGHT
    assert TextBlock(position="FULL").position is Position.FULL


def test_strict_position_rejects_loose_tokens() -> None:
    with pytest.raises(ValidationError):
        TextBlock(position="left-ish")
    with pytest.raises(ValueError):
        parse_position("leftright")
    with pytest.raises(ValueError):
        parse_position(7)


def test_unknown_type_and_negative_row_are_rejected() -> None:
    with pytest.raises(ValidationError):
        BLOCK_ADAPTER.validate_python({"type": "video"})
    with pytest.raises(ValidationError):
        TextBlock(row=-1)


def test_blocks_are_frozen() -> None:
    block = ImageBlock(url=" https://example.com/a.png ")
    assert block.url == "https://example.com/a.png"
    with pytest.raises(ValidationError):
        block.row = 3  # type: ignore[misc]


def test_code_language_defaults_to_text() -> None:
    assert CodeBlock(content="print(1)", language="  ").language == "text"
    assert CodeBlock(content="x", language=" python ").language == "python"
    with pytest.raises(ValidationError):
        CodeBlock(language="x" * 33)


@pytest.mark.parametrize("value", [None, "", "   ", NIL_ID])
def test_placeholder_ids(value: str | None) -> None:
    assert is_placeholder_id(value)
    assert not TextBlock(id=value).has_id


def test_payload_excludes_layout_and_identity() -> None:
    block = CodeBlock(id="k", row=1, content="x = 1", language="python")
    assert block.payload() == {"content": "x = 1", "language": "python"}


def test_with_layout_returns_new_block() -> None:
    block = TextBlock(id="a", row=0, position=Position.LEFT, order=0)
    moved = block.with_layout(3, Position.FULL, order=5)
    assert moved.slot == (3, Position.FULL) and moved.order == 5
    assert block.slot == (0, Position.LEFT)


def test_task_title_is_trimmed_and_required() -> None:
    assert TaskUpdate(title="  Write docs ").title == "Write docs"
    with pytest.raises(ValidationError):
        TaskUpdate(title="   ")
    task = Task(id="t", title="x", blocks=[{"type": "text", "richText": "hi"}])
    assert isinstance(task.blocks[0], TextBlock)


def test_changeset_summary() -> None:
    changes = BlockChangeSet(to_add=[TextBlock(id="n")], unchanged=["a"])
    assert not changes.is_empty
    assert changes.summary() == {"added": 1, "updated": 0, "removed": 0, "unchanged": 1}
    assert BlockChangeSet(unchanged=["a"]).is_empty


def test_title_length_is_checked_after_trimming() -> None:
    assert len(TaskUpdate(title=f"  {'t' * 250}  ").title) == 250
    with pytest.raises(ValidationError):
        TaskUpdate(title="t" * 251)


@pytest.mark.parametrize(
    "block",
    [
        {"type": "text", "richText": "   "},
        {"type": "text", "richText": "x" * (MAX_PAYLOAD_LENGTH + 1)},
        {"type": "image", "url": ""},
        {"type": "image", "url": "images/cat.png"},
        {"type": "image", "url": "https://cdn.example/cat.png", "caption": "c" * (MAX_PAYLOAD_LENGTH + 1)},
        {"type": "checklist", "items": []},
        {"type": "checklist", "items": [{"text": "ok"}, {"text": ""}]},
        {"type": "code", "content": ""},
        {"type": "code", "content": "print()", "language": "x" * 33},
        {"type": "text", "richText": "hi", "order": -1},
        {"type": "text", "richText": "hi", "row": -1},
    ],
)
def test_saved_blocks_must_carry_a_valid_payload(block: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        TaskCreate(title="t", blocks=[block])
    with pytest.raises(ValidationError):
        TaskUpdate(title="t", blocks=[block])


def test_valid_payloads_are_accepted_for_saving() -> None:
    payload = TaskCreate(
        title="t",
        blocks=[
            {"type": "text", "richText": "hi"},
            {"type": "image", "url": "https://cdn.example/cat.png"},
            {"type": "checklist", "items": [{"text": "milk", "done": True}]},
            {"type": "code", "content": "print()"},
        ],
    )
    assert [b.type for b in payload.blocks] == ["text", "image", "checklist", "code"]


def test_drafts_validate_but_are_not_persistable() -> None:
    draft = ChecklistBlock(items=())
    assert draft.items == ()
    with pytest.raises(ValueError, match="at least one item"):
        check_persistable(draft)
    assert check_persistable(ChecklistBlock(items=(ChecklistItem(text="a"),))).items
