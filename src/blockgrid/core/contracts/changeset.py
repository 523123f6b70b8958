"""Change-set contract produced by block reconciliation.

A :class:`BlockChangeSet` is the decision bundle the reconciler hands to the
storage layer. It describes *what* to do; the storage layer decides *how* to
apply it (atomically, inside one transaction).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .block import Block


class BlockChangeSet(BaseModel):
    """Add/update/remove decisions for one task's block collection."""

    model_config = ConfigDict(frozen=True)

    to_add: list[Block] = Field(default_factory=list, description="New blocks, ids assigned.")
    to_update: list[Block] = Field(
        default_factory=list,
        description="Existing blocks in their merged, post-update state; no-op updates excluded.",
    )
    to_remove: list[Block] = Field(
        default_factory=list, description="Existing blocks absent from the submission."
    )
    unchanged: list[str] = Field(
        default_factory=list, description="Ids referenced by the submission with no changes."
    )

    @property
    def is_empty(self) -> bool:
        """True when applying this change set would not modify anything."""
        return not (self.to_add or self.to_update or self.to_remove)

    def summary(self) -> dict[str, int]:
        """Return per-bucket counts, e.g. for logs and API responses."""
        return {
            "added": len(self.to_add),
            "updated": len(self.to_update),
            "removed": len(self.to_remove),
            "unchanged": len(self.unchanged),
        }


__all__ = ["BlockChangeSet"]
