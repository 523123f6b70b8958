"""
Block reconciliation: turn a desired-state list into add/update/remove decisions.

The client always submits the *complete* block list of a task. Reconciliation
compares it with the persisted, id-keyed collection and returns a
:class:`~blockgrid.core.contracts.changeset.BlockChangeSet`; it never touches
storage itself.

Rules
-----
- Two incoming blocks sharing a real id -> :class:`ConflictError`.
- Placeholder id (None, blank, nil UUID) -> add, with a freshly assigned id.
- Unknown real id -> add with that id, or :class:`NotFoundError` when implicit
  creation is forbidden.
- Known id -> update. Layout fields always come from the incoming block; the
  payload only when the variant matches, else :class:`TypeMismatchError`.
  An update whose merged state equals the stored block is a no-op: its id is
  listed in ``unchanged`` and it is left out of ``to_update``.
- Existing ids that no incoming block referenced are removed (mark/sweep).

Every check runs before a change set is built, so a failure never yields a
partial result.
"""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from blockgrid.core.contracts.block import (
    LAYOUT_FIELDS,
    Block,
    ChecklistBlock,
    CodeBlock,
    ImageBlock,
    TextBlock,
)
from blockgrid.core.contracts.changeset import BlockChangeSet
from blockgrid.core.errors import ConflictError, NotFoundError, TypeMismatchError
from blockgrid.core.settings import get_logger

logger = get_logger(__name__)


def new_block_id() -> str:
    """Return a fresh block identifier (UUID4 string)."""
    return str(uuid.uuid4())


def _check_duplicates(incoming: Sequence[Block]) -> None:
    counts = Counter(b.id for b in incoming if b.has_id)
    duplicates = [block_id for block_id, n in counts.items() if n > 1 and block_id is not None]
    if duplicates:
        raise ConflictError(duplicates)


def _merge(existing: Block, incoming: Block) -> Block:
    """Apply ``incoming``'s layout and payload onto ``existing``."""
    update: dict[str, Any] = {name: getattr(incoming, name) for name in LAYOUT_FIELDS}
    match existing, incoming:
        case TextBlock(), TextBlock(rich_text=rich_text):
            update["rich_text"] = rich_text
        case ImageBlock(), ImageBlock(url=url, caption=caption):
            update.update(url=url, caption=caption)
        case ChecklistBlock(), ChecklistBlock(items=items):
            update["items"] = items
        case CodeBlock(), CodeBlock(content=content, language=language):
            update.update(content=content, language=language)
        case _:
            raise TypeMismatchError(str(existing.id), existing.type, incoming.type)
    return existing.model_copy(update=update)


def reconcile(
    existing_by_id: Mapping[str, Block],
    incoming: Sequence[Block],
    *,
    allow_implicit_create: bool = True,
    id_factory: Callable[[], str] = new_block_id,
) -> BlockChangeSet:
    """Diff the persisted blocks against the complete desired state.

    Parameters
    ----------
    existing_by_id : Mapping[str, Block]
        Persisted blocks keyed by id.
    incoming : Sequence[Block]
        The submitted block list (full replacement, not a patch).
    allow_implicit_create : bool
        Admit unknown, non-placeholder ids as new blocks.
    id_factory : Callable[[], str]
        Source of ids for placeholder blocks.

    Returns
    -------
    BlockChangeSet
        ``to_add`` / ``to_update`` / ``to_remove`` decisions. ``to_update``
        holds only blocks that actually change (no-op updates go to
        ``unchanged``); ``to_remove`` follows the iteration order of
        ``existing_by_id``.

    Raises
    ------
    ConflictError, NotFoundError, TypeMismatchError
        See module docstring.
    """
    _check_duplicates(incoming)

    taken = set(existing_by_id) | {b.id for b in incoming if b.has_id and b.id is not None}
    marked: set[str] = set()
    to_add: list[Block] = []
    to_update: list[Block] = []
    unchanged: list[str] = []

    for block in incoming:
        if not block.has_id or block.id is None:
            new_id = id_factory()
            if new_id in taken:
                raise ConflictError([new_id])
            taken.add(new_id)
            to_add.append(block.model_copy(update={"id": new_id}))
            continue

        existing = existing_by_id.get(block.id)
        if existing is None:
            if not allow_implicit_create:
                raise NotFoundError(block.id)
            to_add.append(block)
            continue

        marked.add(block.id)
        merged = _merge(existing, block)
        if merged == existing:
            unchanged.append(block.id)
        else:
            to_update.append(merged)

    to_remove = [b for block_id, b in existing_by_id.items() if block_id not in marked]

    changes = BlockChangeSet(
        to_add=to_add,
        to_update=to_update,
        to_remove=to_remove,
        unchanged=unchanged,
    )
    logger.debug("Reconciled %d incoming blocks: %s", len(incoming), changes.summary())
    return changes


__all__ = ["new_block_id", "reconcile"]
