"""Synchronization of submitted block lists with persisted collections."""

from __future__ import annotations

from .reconciler import new_block_id, reconcile

__all__ = ["new_block_id", "reconcile"]
