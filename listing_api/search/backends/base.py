"""Backing-store interface the listing engine reads through."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from listing_api.search.predicate import Predicate, SortKey


class SearchBackend(ABC):
    """Two reads over one entity's rows.

    Implementations must evaluate ``predicate`` identically in both methods.
    """

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        """Number of rows matching the predicate, ignoring pagination."""

    @abstractmethod
    async def fetch(
        self,
        predicate: Predicate,
        sort: Sequence[SortKey],
        offset: int,
        limit: int,
    ) -> Sequence[Any]:
        """Matching rows ordered by ``sort``, skipping ``offset`` and taking ``limit``."""
