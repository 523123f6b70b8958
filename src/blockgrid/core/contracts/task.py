"""Task contracts: the owner of a block collection.

- :class:`Task`: the persisted aggregate (title, completion flag, blocks).
- :class:`TaskCreate`: request body for creating a task.
- :class:`TaskUpdate`: the *complete* desired state of a task; its ``blocks``
  list replaces the stored collection through reconciliation.

Request bodies validate their blocks with
:func:`~blockgrid.core.contracts.block.check_persistable`: empty text, a
relative image URL or an empty checklist is rejected before anything is
reconciled.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .block import Block, PersistedBlock

_TITLE_MAX = 250


def _clean_title(v: str) -> str:
    title = v.strip()
    if not title:
        raise ValueError("Title is required.")
    if len(title) > _TITLE_MAX:
        raise ValueError(f"Title must be at most {_TITLE_MAX} characters.")
    return title


class _TaskBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    title: str = Field(..., description="Trimmed title, 1..250 characters.")
    blocks: list[PersistedBlock] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _clean_title(v)


class TaskCreate(_TaskBody):
    """Payload for creating a task with an optional initial layout."""


class TaskUpdate(_TaskBody):
    """Complete desired state of a task (full replacement of its blocks)."""

    is_completed: bool = False


class Task(BaseModel):
    """A task and the blocks it exclusively owns."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str
    title: str
    is_completed: bool = False
    blocks: list[Block] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None
    revision: int = Field(default=0, ge=0, description="Bumped on every stored mutation.")

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _clean_title(v)


__all__ = ["Task", "TaskCreate", "TaskUpdate"]
