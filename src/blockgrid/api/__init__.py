"""HTTP transport for BlockGrid (FastAPI)."""

from __future__ import annotations

__all__ = ["__doc__"]
