"""
Tolerant reader for block layout fields.

Blocks reach the layout code from several places: freshly parsed JSON from a
client, rows loaded from storage, typed :class:`~blockgrid.core.contracts.block.Block`
models. Their layout fields are not always well-formed: keys may be cased
differently (``Row``/``row``), numbers may arrive as strings, and positions
may be encoded as ``0/1/2`` or as loose strings.

This module reads ``row``, ``position`` and ``order`` through a fallback-key
lookup and never raises for malformed values. It falls back to documented
defaults instead:

- ``row``      -> ``0``
- ``order``    -> ``math.inf`` (sorts last)
- ``position`` -> ``Position.FULL``

Position precedence
-------------------
For strings, matching runs in this order and the first hit wins:

1. digit strings ``"0"/"1"/"2"``,
2. substring ``"left"``, then ``"right"``, then ``"full"``,
3. non-empty prefix of ``"left"``, ``"right"``, ``"full"``,
4. anything else (including the legacy ``"center"``) reads as ``full``.

A malformed token containing both ``"left"`` and ``"right"`` therefore reads
as ``left``. Strict callers should use
:func:`~blockgrid.core.contracts.block.parse_position` instead.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any, Final

from blockgrid.core.contracts.block import (
    BLOCK_ADAPTER,
    POSITION_CODES,
    Block,
    Position,
)
from blockgrid.core.settings import get_logger

logger = get_logger(__name__)

_ROW_KEYS: Final[tuple[str, ...]] = ("row", "Row", "ROW")
_POSITION_KEYS: Final[tuple[str, ...]] = ("position", "Position", "POSITION")
_ORDER_KEYS: Final[tuple[str, ...]] = ("order", "Order", "ORDER")
_TYPE_KEYS: Final[tuple[str, ...]] = ("type", "Type", "TYPE")
_ID_KEYS: Final[tuple[str, ...]] = ("id", "Id", "ID")

_PRECEDENCE: Final[tuple[Position, ...]] = (Position.LEFT, Position.RIGHT, Position.FULL)

# Payload keys used by earlier clients, mapped to the current wire names.
_LEGACY_KEYS: Final[dict[str, str]] = {
    "richTextJson": "richText",
    "imageUrl": "url",
    "captionRichTextJson": "caption",
    "codeContent": "content",
}

_MISSING: Final = object()


def _lookup(raw: Any, keys: tuple[str, ...]) -> Any:
    """Return the first present value among ``keys`` (mapping or attributes)."""
    if isinstance(raw, Mapping):
        for key in keys:
            if key in raw:
                return raw[key]
        return _MISSING
    for key in keys:
        value = getattr(raw, key, _MISSING)
        if value is not _MISSING:
            return value
    return _MISSING


def _as_number(value: Any) -> float | None:
    """Interpret ``value`` as a finite number, or return None."""
    if isinstance(value, bool) or isinstance(value, Position):
        return None
    try:
        if isinstance(value, int | float):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _digit_code(token: str) -> int | None:
    """Return ``int(token)`` for an ASCII digit string, else None."""
    if not (token.isascii() and token.isdigit()):
        return None
    try:
        return int(token)
    except ValueError:  # longer than the interpreter's int-string limit
        return None


# ---- Field readers --------------------------------------------------------------


def read_row(raw: Any) -> int:
    """Return the block's row, or ``0`` when missing or unparseable.

    Rows are grid line indices, so a fractional value such as ``1.5`` is
    unparseable and reads as ``0``; it does not sort between rows 1 and 2.
    """
    number = _as_number(_lookup(raw, _ROW_KEYS))
    if number is None or number < 0 or not number.is_integer():
        return 0
    return int(number)


def read_order(raw: Any) -> float:
    """Return the block's order, or ``math.inf`` when missing or unparseable."""
    number = _as_number(_lookup(raw, _ORDER_KEYS))
    return math.inf if number is None else number


def position_from(value: Any) -> Position:
    """Map a loosely-encoded position value to a :class:`Position`."""
    if isinstance(value, Position):
        return value
    if isinstance(value, bool):
        return Position.FULL
    if isinstance(value, int | float):
        if isinstance(value, float) and not value.is_integer():
            return Position.FULL
        return POSITION_CODES.get(int(value), Position.FULL)
    if not isinstance(value, str):
        return Position.FULL

    token = value.strip().lower()
    if not token:
        return Position.FULL
    code = _digit_code(token)
    if code is not None:
        return POSITION_CODES.get(code, Position.FULL)
    for candidate in _PRECEDENCE:
        if candidate.value in token:
            return candidate
    for candidate in _PRECEDENCE:
        if candidate.value.startswith(token):
            return candidate
    # Anything else, including the legacy "center" token, spans the row.
    return Position.FULL


def read_position(raw: Any) -> Position:
    """Return the block's position, or ``Position.FULL`` when unparseable."""
    return position_from(_lookup(raw, _POSITION_KEYS))


# ---- Ingestion -------------------------------------------------------------------


def _rename_legacy(data: dict[str, Any]) -> dict[str, Any]:
    for old, new in _LEGACY_KEYS.items():
        if old in data and new not in data:
            data[new] = data.pop(old)
    items = data.get("items")
    if isinstance(items, list):
        data["items"] = [
            {**item, "text": item["richTextJson"]}
            if isinstance(item, Mapping) and "richTextJson" in item and "text" not in item
            else item
            for item in items
        ]
    return data


def coerce_block(raw: Mapping[str, Any], fallback_order: int) -> Block:
    """Build a typed :data:`Block` from a loosely-shaped mapping.

    Layout fields go through the tolerant readers; an unreadable ``order``
    becomes ``fallback_order``. The payload is validated by pydantic, so a
    missing or unknown ``type`` (or a malformed payload) raises
    :class:`pydantic.ValidationError`.
    """
    data: dict[str, Any] = {
        key: value
        for key, value in raw.items()
        if key not in (*_ROW_KEYS, *_POSITION_KEYS, *_ORDER_KEYS, *_TYPE_KEYS, *_ID_KEYS)
    }
    block_type = _lookup(raw, _TYPE_KEYS)
    if isinstance(block_type, str):
        block_type = block_type.strip().lower()
    block_id = _lookup(raw, _ID_KEYS)

    order = read_order(raw)
    if math.isinf(order):
        logger.debug("Block %r has no readable order; using %d", block_id, fallback_order)
        order = fallback_order

    data.update(
        {
            "type": None if block_type is _MISSING else block_type,
            "id": None if block_id is _MISSING or block_id is None else str(block_id),
            "row": read_row(raw),
            "position": read_position(raw),
            "order": int(order),
        }
    )
    return BLOCK_ADAPTER.validate_python(_rename_legacy(data))


def ingest_blocks(raws: Iterable[Mapping[str, Any]]) -> list[Block]:
    """Coerce every raw block, using its index as the fallback order."""
    return [coerce_block(raw, index) for index, raw in enumerate(raws)]


__all__ = [
    "coerce_block",
    "ingest_blocks",
    "position_from",
    "read_order",
    "read_position",
    "read_row",
]
