"""
Block Contract

This module defines the content blocks a task owns. Each block carries the
shared layout fields (``row``, ``position``, ``order``) plus a payload that
depends on its variant:

- ``text``      -> :class:`TextBlock`      (opaque rich-text JSON)
- ``image``     -> :class:`ImageBlock`     (url + caption rich text)
- ``checklist`` -> :class:`ChecklistBlock` (ordered ``{text, done}`` items)
- ``code``      -> :class:`CodeBlock`      (content + language)

The variants form a closed, pydantic-discriminated union (:data:`Block`) keyed
on ``type``. Models are frozen: layout code derives new blocks through
``model_copy`` and never mutates a snapshot in place.

Wire format
-----------
Fields serialize with camelCase aliases (``richText``); snake_case names are
also accepted on input. ``position`` serializes as ``"left" | "right" | "full"``
and accepts the numeric codes ``0/1/2`` on input.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Final, Literal, Self
from urllib.parse import urlsplit

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

#: Ids with this value (or empty/blank) are "not yet assigned".
NIL_ID: Final[str] = "00000000-0000-0000-0000-000000000000"

LAYOUT_FIELDS: Final[tuple[str, ...]] = ("row", "position", "order")


class Position(str, Enum):
    """Logical column slot of a block inside its row."""

    LEFT = "left"
    RIGHT = "right"
    FULL = "full"

    @property
    def rank(self) -> int:
        """Visual rank within a row: left (0) before right (1) before full (2)."""
        return _POSITION_RANK[self]


_POSITION_RANK: Final[dict[Position, int]] = {
    Position.LEFT: 0,
    Position.RIGHT: 1,
    Position.FULL: 2,
}

#: Numeric position codes accepted during ingestion.
POSITION_CODES: Final[dict[int, Position]] = {
    0: Position.LEFT,
    1: Position.RIGHT,
    2: Position.FULL,
}

BlockType = Literal["text", "image", "checklist", "code"]
BLOCK_TYPES: Final[tuple[str, ...]] = ("text", "image", "checklist", "code")


def is_placeholder_id(value: str | None) -> bool:
    """Return True if ``value`` means "no identifier assigned yet"."""
    if value is None:
        return True
    stripped = value.strip()
    return not stripped or stripped == NIL_ID


def parse_position(value: Any) -> Position:
    """Parse a canonical position token.

    Accepts :class:`Position` members, the codes ``0/1/2`` (as ints or digit
    strings) and the names ``left``/``right``/``full`` in any case. Anything
    else raises ``ValueError``; the tolerant substring matching used by the
    display path lives in :mod:`blockgrid.layout.reader`.
    """
    if isinstance(value, Position):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if value in POSITION_CODES:
            return POSITION_CODES[value]
        raise ValueError(f"Unknown position code: {value}")
    if isinstance(value, str):
        token = value.strip().lower()
        if token.isascii() and token.isdigit() and len(token) == 1:
            code = int(token)
            if code in POSITION_CODES:
                return POSITION_CODES[code]
        try:
            return Position(token)
        except ValueError:
            pass
    raise ValueError(f"Unknown position: {value!r}")


# ---- Base ---------------------------------------------------------------------


class BlockBase(BaseModel):
    """Fields shared by every block variant."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str | None = Field(default=None, description="Block id; None/empty means unassigned.")
    row: int = Field(default=0, ge=0, description="Logical grid line (0-based).")
    position: Position = Field(default=Position.FULL, description="Column slot in the row.")
    order: int = Field(default=0, description="Persisted visual sequence number.")

    @field_validator("position", mode="before")
    @classmethod
    def _coerce_position(cls, v: Any) -> Position:
        return parse_position(v)

    @property
    def has_id(self) -> bool:
        """True when the block carries a real (non-placeholder) id."""
        return not is_placeholder_id(self.id)

    @property
    def slot(self) -> tuple[int, Position]:
        """The ``(row, position)`` pair this block occupies."""
        return self.row, self.position

    def payload(self) -> dict[str, Any]:
        """Return the variant-specific fields (everything but id, type and layout)."""
        skip = {"id", "type", *LAYOUT_FIELDS}
        return {name: getattr(self, name) for name in type(self).model_fields if name not in skip}

    def with_layout(self, row: int, position: Position, order: int | None = None) -> Self:
        """Return a copy of this block moved to ``(row, position)``."""
        update: dict[str, Any] = {"row": row, "position": position}
        if order is not None:
            update["order"] = order
        return self.model_copy(update=update)


# ---- Variants -----------------------------------------------------------------


class TextBlock(BlockBase):
    """A rich-text paragraph."""

    type: Literal["text"] = "text"
    rich_text: str = Field(default="", description="Opaque rich-text JSON document.")


class ImageBlock(BlockBase):
    """An image with a rich-text caption."""

    type: Literal["image"] = "image"
    url: str = Field(default="", description="Absolute image URL.")
    caption: str = Field(default="", description="Opaque rich-text JSON caption.")

    @field_validator("url")
    @classmethod
    def _strip_url(cls, v: str) -> str:
        return v.strip()


class ChecklistItem(BaseModel):
    """One entry of a checklist."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    text: str = Field(default="", description="Opaque rich-text JSON of the item.")
    done: bool = False


class ChecklistBlock(BlockBase):
    """An ordered list of checkable items."""

    type: Literal["checklist"] = "checklist"
    items: tuple[ChecklistItem, ...] = Field(default=(), description="Items in display order.")


class CodeBlock(BlockBase):
    """A code snippet with a language label."""

    type: Literal["code"] = "code"
    content: str = Field(default="", description="Source code.")
    language: str = Field(default="text", max_length=32, description="Language label.")

    @field_validator("language", mode="before")
    @classmethod
    def _default_language(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "text"
        return v.strip() if isinstance(v, str) else v


Block = Annotated[
    TextBlock | ImageBlock | ChecklistBlock | CodeBlock,
    Field(discriminator="type"),
]

BLOCK_ADAPTER: TypeAdapter[Block] = TypeAdapter(Block)
BLOCK_LIST_ADAPTER: TypeAdapter[list[Block]] = TypeAdapter(list[Block])


def dump_blocks(blocks: list[Block]) -> list[dict[str, Any]]:
    """Serialize blocks to their JSON wire shape (camelCase aliases)."""
    return BLOCK_LIST_ADAPTER.dump_python(blocks, mode="json", by_alias=True)



# ---- Save rules ---------------------------------------------------------------

#: Upper bound for rich-text JSON and code payloads.
MAX_PAYLOAD_LENGTH: Final[int] = 200_000


def _is_absolute_url(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme) and bool(parts.netloc or parts.path)


def _check_text(name: str, value: str, problems: list[str], *, required: bool = True) -> None:
    if required and not value.strip():
        problems.append(f"{name} is required")
    elif len(value) > MAX_PAYLOAD_LENGTH:
        problems.append(f"{name} exceeds {MAX_PAYLOAD_LENGTH} characters")


def check_persistable(block: Block) -> Block:
    """Enforce the payload rules a block must meet to be stored.

    Drafts built in the editor (e.g. by :func:`~blockgrid.layout.edits.append_block`)
    may be empty; saving one is rejected with ``ValueError``.
    """
    problems: list[str] = []
    if block.order < 0:
        problems.append("order must be >= 0")
    match block:
        case TextBlock(rich_text=rich_text):
            _check_text("richText", rich_text, problems)
        case ImageBlock(url=url, caption=caption):
            if not url:
                problems.append("url is required")
            elif not _is_absolute_url(url):
                problems.append("url must be an absolute URL")
            _check_text("caption", caption, problems, required=False)
        case ChecklistBlock(items=items):
            if not items:
                problems.append("checklist must contain at least one item")
            for index, item in enumerate(items):
                _check_text(f"items[{index}].text", item.text, problems)
        case CodeBlock(content=content):
            _check_text("content", content, problems)
    if problems:
        raise ValueError(f"Block {block.id!r} ({block.type}): {'; '.join(problems)}")
    return block


#: A :data:`Block` that passed :func:`check_persistable` during validation.
PersistedBlock = Annotated[Block, AfterValidator(check_persistable)]


__all__ = [
    "Block",
    "BlockBase",
    "BlockType",
    "BLOCK_ADAPTER",
    "BLOCK_LIST_ADAPTER",
    "BLOCK_TYPES",
    "ChecklistBlock",
    "ChecklistItem",
    "CodeBlock",
    "ImageBlock",
    "LAYOUT_FIELDS",
    "MAX_PAYLOAD_LENGTH",
    "NIL_ID",
    "POSITION_CODES",
    "PersistedBlock",
    "Position",
    "TextBlock",
    "check_persistable",
    "dump_blocks",
    "is_placeholder_id",
    "parse_position",
]
