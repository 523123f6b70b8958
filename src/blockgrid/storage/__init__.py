"""Storage collaborators that apply reconciliation change sets."""

from __future__ import annotations

from .memory import TaskStore, get_task_store

__all__ = ["TaskStore", "get_task_store"]
