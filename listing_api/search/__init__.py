"""Paginated list query engine.

Usage:
    page = await search(request, spec, context=caller, backend=backend)
"""

from listing_api.search.backends import MemorySearchBackend, SearchBackend, SqlAlchemySearchBackend
from listing_api.search.context import CallerContext
from listing_api.search.engine import search
from listing_api.search.predicate import (
    AnyOf,
    Clause,
    Operator,
    Predicate,
    SortKey,
    build_predicate,
    resolve_limit,
    resolve_page,
    resolve_sort,
)
from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType, ScopeRule

__all__ = [
    "search",
    "CallerContext",
    "EntitySearchSpec",
    "FilterField",
    "MatchType",
    "ScopeRule",
    "AnyOf",
    "Clause",
    "Operator",
    "Predicate",
    "SortKey",
    "build_predicate",
    "resolve_limit",
    "resolve_page",
    "resolve_sort",
    "SearchBackend",
    "MemorySearchBackend",
    "SqlAlchemySearchBackend",
]
