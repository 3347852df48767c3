"""SQLAlchemy 2.0 async backend.

Each read opens its own session from the shared ``DatabaseManager`` so the
count and the page query can run at the same time.
"""

import asyncio
from typing import Any, Callable, List, Optional, Sequence, Type

from sqlalchemy import func, inspect as sa_inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from listing_api.core.config import settings
from listing_api.core.db_client import DatabaseManager, db
from listing_api.core.exceptions import BackingStoreError
from listing_api.core.logging import get_db_logger
from listing_api.search.backends.base import SearchBackend
from listing_api.search.predicate import AnyOf, Clause, Operator, Predicate, SortKey, Term
from listing_api.search.spec import EntitySearchSpec

logger = get_db_logger()

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SqlAlchemySearchBackend(SearchBackend):
    """Compiles predicates against one mapped ORM model."""

    def __init__(
        self,
        model: Type[Any],
        database: Optional[DatabaseManager] = None,
        timeout: Optional[float] = None,
    ):
        self.model = model
        self.database = database or db
        self.timeout = timeout or settings.SEARCH_READ_TIMEOUT

    @classmethod
    def for_spec(cls, model: Type[Any], spec: EntitySearchSpec, **kwargs: Any) -> "SqlAlchemySearchBackend":
        """Build a backend after checking the model has every column the listing uses.

        Raises:
            ValueError: If the listing references a column the model lacks
        """
        available = {attr.key for attr in sa_inspect(model).column_attrs}
        missing = sorted(spec.referenced_columns() - available)
        if missing:
            raise ValueError(
                f"Listing '{spec.name}' references columns missing from "
                f"{model.__name__}: {', '.join(missing)}"
            )
        return cls(model, **kwargs)

    def _column(self, name: str) -> Any:
        return getattr(self.model, name)

    def _compile_clause(self, clause: Clause) -> ColumnElement:
        column = self._column(clause.column)

        if clause.op == Operator.EQ:
            return column == clause.value
        if clause.op == Operator.CONTAINS:
            pattern = f"%{escape_like(str(clause.value))}%"
            if clause.case_sensitive:
                return column.like(pattern, escape=LIKE_ESCAPE)
            return column.ilike(pattern, escape=LIKE_ESCAPE)
        if clause.op == Operator.GTE:
            return column >= clause.value
        if clause.op == Operator.LTE:
            return column <= clause.value
        if clause.op == Operator.IS_NULL:
            return column.is_(None)

        raise ValueError(f"Unsupported operator: {clause.op}")

    def _compile_term(self, term: Term) -> ColumnElement:
        if isinstance(term, AnyOf):
            return or_(*(self._compile_clause(c) for c in term.clauses))
        return self._compile_clause(term)

    def where_clauses(self, predicate: Predicate) -> List[ColumnElement]:
        return [self._compile_term(term) for term in predicate.terms]

    def order_by_clauses(self, sort: Sequence[SortKey]) -> List[ColumnElement]:
        clauses = []
        for key in sort:
            column = self._column(key.column)
            if key.descending:
                clauses.append(column.desc().nulls_first())
            else:
                clauses.append(column.asc().nulls_last())
        return clauses

    async def _execute(
        self, statement: Any, operation: str, extract: Callable[[Any], Any]
    ) -> Any:
        # Rows are materialised before the session closes
        try:
            async with asyncio.timeout(self.timeout):
                async with self.database.session() as session:
                    result = await session.execute(statement)
                    return extract(result)
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            logger.error(
                "Listing read failed",
                table=self.model.__tablename__,
                operation=operation,
                error=str(e),
            )
            raise BackingStoreError(
                f"Failed to read {self.model.__tablename__}",
                details={"operation": operation},
            ) from e

    async def count(self, predicate: Predicate) -> int:
        statement = (
            select(func.count())
            .select_from(self.model)
            .where(*self.where_clauses(predicate))
        )
        return await self._execute(statement, "count", lambda r: int(r.scalar_one()))

    async def fetch(
        self,
        predicate: Predicate,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> Sequence[Any]:
        statement = (
            select(self.model)
            .where(*self.where_clauses(predicate))
            .order_by(*self.order_by_clauses(sort))
            .offset(offset)
            .limit(limit)
        )
        return await self._execute(statement, "fetch", lambda r: r.scalars().all())
