"""Backend-neutral query predicate and its construction from a request.

A ``Predicate`` is built once per listing call and handed unchanged to both
the count and the page read, so the two can never disagree about which rows
match.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from listing_api.core.config import settings
from listing_api.core.exceptions import AuthorizationError, ValidationError
from listing_api.models.schemas.validators import coerce_positive_int
from listing_api.search.context import CallerContext
from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType

LOWER_BOUND_KEYS = ("from", "gte")
UPPER_BOUND_KEYS = ("to", "lte")


class Operator(str, Enum):
    EQ = "eq"
    CONTAINS = "contains"
    GTE = "gte"
    LTE = "lte"
    IS_NULL = "is_null"


@dataclass(frozen=True)
class Clause:
    column: str
    op: Operator
    value: Any = None
    case_sensitive: bool = False


@dataclass(frozen=True)
class AnyOf:
    """Matches when at least one of its clauses matches."""

    clauses: Tuple[Clause, ...]


Term = Union[Clause, AnyOf]


@dataclass(frozen=True)
class Predicate:
    """Conjunction of the mandatory scope clauses and the caller's filters."""

    scope: Tuple[Clause, ...]
    filters: Tuple[Term, ...] = ()

    @property
    def terms(self) -> Tuple[Term, ...]:
        return self.scope + self.filters


@dataclass(frozen=True)
class SortKey:
    column: str
    descending: bool = False


@lru_cache(maxsize=None)
def _adapter(value_type: type) -> TypeAdapter:
    return TypeAdapter(value_type)


def _coerce(field: FilterField, raw: Any) -> Any:
    if field.value_type is None:
        return raw
    try:
        return _adapter(field.value_type).validate_python(raw)
    except PydanticValidationError:
        raise ValidationError(
            f"Filter '{field.name}' expects a {field.value_type.__name__} value",
            details={"field": field.name, "value": str(raw)},
        )


def _same_value(a: Any, b: Any) -> bool:
    return a == b or str(a) == str(b)


def _scope_clauses(
    spec: EntitySearchSpec, context: CallerContext
) -> Tuple[Tuple[Clause, ...], Dict[str, Clause]]:
    clauses: List[Clause] = []
    by_column: Dict[str, Clause] = {}

    for rule in spec.scope:
        if rule.is_null:
            clause = Clause(rule.column, Operator.IS_NULL)
        elif rule.context_key is not None:
            value = context.get(rule.context_key)
            if value is None:
                raise AuthorizationError(
                    f"Listing '{spec.name}' requires '{rule.context_key}' in the caller context",
                    details={"listing": spec.name, "missing": rule.context_key},
                )
            clause = Clause(rule.column, Operator.EQ, value)
        else:
            clause = Clause(rule.column, Operator.EQ, rule.value)

        clauses.append(clause)
        by_column[rule.column] = clause

    return tuple(clauses), by_column


def _range_clauses(field: FilterField, raw: Any) -> List[Clause]:
    if not isinstance(raw, Mapping):
        raise ValidationError(
            f"Range filter '{field.name}' needs an object with 'from'/'to' bounds",
            details={"field": field.name},
        )

    if not any(key in raw for key in LOWER_BOUND_KEYS + UPPER_BOUND_KEYS):
        raise ValidationError(
            f"Range filter '{field.name}' needs a 'from' or 'to' bound",
            details={"field": field.name, "keys": sorted(str(k) for k in raw)},
        )

    lower = next((raw[k] for k in LOWER_BOUND_KEYS if raw.get(k) is not None), None)
    upper = next((raw[k] for k in UPPER_BOUND_KEYS if raw.get(k) is not None), None)

    clauses = []
    if lower is not None:
        clauses.append(Clause(field.target, Operator.GTE, _coerce(field, lower)))
    if upper is not None:
        clauses.append(Clause(field.target, Operator.LTE, _coerce(field, upper)))
    return clauses


def _scalar_clause(field: FilterField, raw: Any) -> Optional[Clause]:
    if isinstance(raw, (Mapping, list, tuple, set)):
        raise ValidationError(
            f"Filter '{field.name}' expects a single value",
            details={"field": field.name},
        )

    value = _coerce(field, raw)

    if field.match == MatchType.CONTAINS:
        term = str(value)
        if not term:
            return None
        return Clause(field.target, Operator.CONTAINS, term, field.case_sensitive)

    return Clause(field.target, Operator.EQ, value)


def _check_scope_bypass(
    spec: EntitySearchSpec, clause: Clause, scoped: Dict[str, Clause]
) -> None:
    scope = scoped.get(clause.column)
    if scope is None or clause.op != Operator.EQ:
        return

    if scope.op == Operator.IS_NULL or not _same_value(clause.value, scope.value):
        raise AuthorizationError(
            f"Filter on '{clause.column}' is outside the caller's scope",
            details={"listing": spec.name, "field": clause.column},
        )


def build_predicate(
    spec: EntitySearchSpec,
    filters: Optional[Mapping[str, Any]],
    context: CallerContext,
    search: Optional[str] = None,
) -> Predicate:
    """Build the single predicate shared by the count and page reads.

    Scope clauses come first and are always present. Filter keys the listing
    does not declare are dropped, as are ``None`` values and ranges without
    any non-null bound.

    Raises:
        AuthorizationError: If a scope value is missing from the context, or
            a filter tries to select rows outside the scope
        ValidationError: If a filter value has the wrong shape or type
    """
    scope, scoped = _scope_clauses(spec, context)
    filters = filters or {}

    terms: List[Term] = []
    for field in spec.filterable_fields:
        raw = filters.get(field.name)
        if raw is None:
            continue

        if field.match == MatchType.RANGE:
            terms.extend(_range_clauses(field, raw))
            continue

        clause = _scalar_clause(field, raw)
        if clause is None:
            continue
        _check_scope_bypass(spec, clause, scoped)
        terms.append(clause)

    if search and spec.searchable_fields:
        terms.append(
            AnyOf(tuple(Clause(col, Operator.CONTAINS, search) for col in spec.searchable_fields))
        )

    return Predicate(scope=scope, filters=tuple(terms))


def resolve_sort(
    spec: EntitySearchSpec,
    sort_field: Optional[str] = None,
    sort_direction: Optional[str] = None,
) -> Tuple[SortKey, ...]:
    """Whitelisted sort key plus the primary key as a deterministic tie-break."""
    column = sort_field if sort_field in spec.sortable_fields else spec.default_sort_field
    descending = str(getattr(sort_direction, "value", sort_direction) or "desc").lower() != "asc"

    keys = [SortKey(column, descending)]
    if column != spec.primary_key:
        keys.append(SortKey(spec.primary_key, False))
    return tuple(keys)


def resolve_page(page: Any) -> int:
    return coerce_positive_int(page) or 1


def resolve_limit(limit: Any, spec: EntitySearchSpec) -> int:
    """Effective page size: caller value or the listing default, clamped."""
    default = spec.default_limit or settings.SEARCH_DEFAULT_LIMIT
    maximum = spec.max_limit or settings.SEARCH_MAX_LIMIT
    return min(coerce_positive_int(limit) or default, maximum)
