"""Declarative description of how one entity may be listed.

A listing is configured entirely by an ``EntitySearchSpec``: which columns
callers may filter and sort on, how rows are scoped to the caller, and how a
row becomes a summary record. The engine itself has no per-entity code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple


class MatchType(str, Enum):
    """How a filter value is compared against its column."""

    EXACT = "exact"
    CONTAINS = "contains"
    RANGE = "range"


@dataclass(frozen=True)
class FilterField:
    """A request filter key and how it maps onto the store.

    ``column`` defaults to ``name``. ``value_type`` is the Python type the raw
    request value is coerced to before it reaches the backend.
    """

    name: str
    match: MatchType = MatchType.EXACT
    column: Optional[str] = None
    value_type: Optional[type] = None
    case_sensitive: bool = False

    @property
    def target(self) -> str:
        return self.column or self.name


@dataclass(frozen=True)
class ScopeRule:
    """A mandatory predicate applied to every query of a listing.

    Exactly one of the following is used:
    - ``context_key``: column equals that value from the caller context
    - ``value``: column equals a fixed value
    - ``is_null``: column IS NULL (soft-delete style)
    """

    column: str
    context_key: Optional[str] = None
    value: Any = None
    is_null: bool = False

    def __post_init__(self):
        kinds = sum(
            [self.context_key is not None, self.value is not None, self.is_null]
        )
        if kinds != 1:
            raise ValueError(
                f"Scope rule on '{self.column}' needs exactly one of "
                "context_key, value or is_null"
            )


@dataclass(frozen=True)
class EntitySearchSpec:
    name: str
    scope: Tuple[ScopeRule, ...]
    filterable_fields: Tuple[FilterField, ...]
    sortable_fields: Tuple[str, ...]
    default_sort_field: str
    to_summary: Callable[[Any], Any]
    searchable_fields: Tuple[str, ...] = ()
    default_limit: Optional[int] = None
    max_limit: Optional[int] = None
    primary_key: str = "id"
    _filters_by_name: Dict[str, FilterField] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        # Normalise sequences so specs can be declared with lists
        for attr in ("scope", "filterable_fields", "sortable_fields", "searchable_fields"):
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

        if not self.scope:
            raise ValueError(f"Listing '{self.name}' must declare at least one scope rule")

        if self.default_sort_field not in self.sortable_fields:
            raise ValueError(
                f"Listing '{self.name}': default sort field "
                f"'{self.default_sort_field}' is not sortable"
            )

        by_name: Dict[str, FilterField] = {}
        for f in self.filterable_fields:
            if f.name in by_name:
                raise ValueError(f"Listing '{self.name}': duplicate filter '{f.name}'")
            by_name[f.name] = f
        object.__setattr__(self, "_filters_by_name", by_name)

        for attr in ("default_limit", "max_limit"):
            value = getattr(self, attr)
            if value is not None and value < 1:
                raise ValueError(f"Listing '{self.name}': {attr} must be positive")

    @property
    def filters_by_name(self) -> Dict[str, FilterField]:
        return self._filters_by_name

    def referenced_columns(self) -> FrozenSet[str]:
        """Every store column this listing reads, filters or sorts on."""
        columns = {rule.column for rule in self.scope}
        columns.update(f.target for f in self.filterable_fields)
        columns.update(self.sortable_fields)
        columns.update(self.searchable_fields)
        columns.add(self.primary_key)
        return frozenset(columns)

