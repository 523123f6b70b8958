"""API routers: task persistence and stateless layout operations."""

from __future__ import annotations

__all__ = ["__doc__"]
