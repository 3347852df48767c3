"""Backing-store adapters for the listing engine."""

from listing_api.search.backends.base import SearchBackend
from listing_api.search.backends.memory import MemorySearchBackend
from listing_api.search.backends.sql import SqlAlchemySearchBackend

__all__ = ["SearchBackend", "MemorySearchBackend", "SqlAlchemySearchBackend"]
