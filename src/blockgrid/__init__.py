"""BlockGrid: grid layout and reconciliation for task content blocks.

The package keeps a task's blocks (text, image, checklist, code) on a
row × {left, right, full} grid and synchronizes client-submitted block lists
against the persisted collection.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
