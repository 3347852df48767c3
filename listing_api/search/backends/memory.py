"""In-process backend evaluating predicates over plain rows."""

from typing import Any, Iterable, List, Sequence

from listing_api.search.backends.base import SearchBackend
from listing_api.search.predicate import AnyOf, Clause, Operator, Predicate, SortKey, Term


def _read(row: Any, column: str) -> Any:
    if isinstance(row, dict):
        return row.get(column)
    return getattr(row, column, None)


def _fold(value: Any, case_sensitive: bool) -> str:
    text = str(value)
    return text if case_sensitive else text.casefold()


def clause_matches(row: Any, clause: Clause) -> bool:
    value = _read(row, clause.column)

    if clause.op == Operator.IS_NULL:
        return value is None
    if value is None:
        return False
    if clause.op == Operator.EQ:
        return value == clause.value
    if clause.op == Operator.CONTAINS:
        return _fold(clause.value, clause.case_sensitive) in _fold(value, clause.case_sensitive)
    if clause.op == Operator.GTE:
        return value >= clause.value
    if clause.op == Operator.LTE:
        return value <= clause.value

    raise ValueError(f"Unsupported operator: {clause.op}")


def term_matches(row: Any, term: Term) -> bool:
    if isinstance(term, AnyOf):
        return any(clause_matches(row, c) for c in term.clauses)
    return clause_matches(row, term)


class MemorySearchBackend(SearchBackend):
    """Serves listings from a list of dicts or objects.

    NULLs sort last ascending and first descending, matching PostgreSQL.
    """

    def __init__(self, rows: Iterable[Any]):
        self.rows = list(rows)

    def _matching(self, predicate: Predicate) -> List[Any]:
        return [
            row for row in self.rows
            if all(term_matches(row, term) for term in predicate.terms)
        ]

    async def count(self, predicate: Predicate) -> int:
        return len(self._matching(predicate))

    async def fetch(
        self,
        predicate: Predicate,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> Sequence[Any]:
        rows = self._matching(predicate)

        # Stable sorts applied from the least significant key up
        for key in reversed(sort):
            rows.sort(
                key=lambda row, col=key.column: (_read(row, col) is None, _read(row, col)),
                reverse=key.descending,
            )

        return rows[offset:offset + limit]
