"""Database related helpers."""

from __future__ import annotations

from .base import metadata
from .session import dispose_engine, get_engine, get_session, init_db

__all__ = ["dispose_engine", "get_engine", "get_session", "init_db", "metadata"]
