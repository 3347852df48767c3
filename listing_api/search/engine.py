"""The generic paginated listing engine."""

import asyncio
import math
from typing import Any, Sequence, Tuple

from listing_api.core.config import settings
from listing_api.core.exceptions import BackingStoreError, ListingError
from listing_api.core.logging import get_logger
from listing_api.models.schemas.base import Page, PageRequest, Pagination
from listing_api.search.backends.base import SearchBackend
from listing_api.search.context import CallerContext
from listing_api.search.predicate import (
    Predicate,
    SortKey,
    build_predicate,
    resolve_limit,
    resolve_page,
    resolve_sort,
)
from listing_api.search.spec import EntitySearchSpec

logger = get_logger(__name__)

# Largest OFFSET a signed 64-bit bind parameter can carry
MAX_OFFSET = 2**63 - 1


async def _read_concurrently(
    backend: SearchBackend,
    predicate: Predicate,
    sort: Sequence[SortKey],
    offset: int,
    limit: int,
) -> Tuple[int, Sequence[Any]]:
    tasks = [
        asyncio.ensure_future(backend.count(predicate)),
        asyncio.ensure_future(backend.fetch(predicate, sort, offset, limit)),
    ]
    try:
        total, rows = await asyncio.gather(*tasks)
    except BaseException:
        # Cancel the sibling read and collect its outcome
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return total, rows


async def _read_sequentially(
    backend: SearchBackend,
    predicate: Predicate,
    sort: Sequence[SortKey],
    offset: int,
    limit: int,
) -> Tuple[int, Sequence[Any]]:
    total = await backend.count(predicate)
    rows = await backend.fetch(predicate, sort, offset, limit)
    return total, rows


async def _count_only(
    backend: SearchBackend,
    predicate: Predicate,
    sort: Sequence[SortKey],
    offset: int,
    limit: int,
) -> Tuple[int, Sequence[Any]]:
    return await backend.count(predicate), []


async def search(
    request: PageRequest,
    spec: EntitySearchSpec,
    *,
    context: CallerContext,
    backend: SearchBackend,
) -> Page:
    """
    Return one page of ``spec``'s rows visible to ``context``.

    Paging values are coerced rather than rejected: missing, zero, negative
    or non-numeric values fall back to the defaults and the limit is clamped
    to the listing maximum. The same predicate drives both the total count
    and the page read.

    Raises:
        AuthorizationError: If the caller cannot satisfy the listing scope
        ValidationError: If a filter value has the wrong shape or type
        BackingStoreError: If either read fails
    """
    page = resolve_page(request.page)
    limit = resolve_limit(request.limit, spec)
    offset = (page - 1) * limit

    predicate = build_predicate(spec, request.filters, context, search=request.search)
    sort = resolve_sort(spec, request.sort_field, request.sort_direction)

    if offset > MAX_OFFSET:
        # No store can hold rows this far out
        read = _count_only
    elif settings.SEARCH_CONCURRENT_READS:
        read = _read_concurrently
    else:
        read = _read_sequentially
    try:
        total, rows = await read(backend, predicate, sort, offset, limit)
    except ListingError:
        raise
    except Exception as e:
        logger.error(
            "Listing read failed",
            listing=spec.name,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise BackingStoreError(
            f"Failed to list {spec.name}",
            details={"listing": spec.name},
        ) from e

    data = [spec.to_summary(row) for row in rows]
    pages = math.ceil(total / limit) if total > 0 else 0

    logger.debug(
        "Listing page built",
        listing=spec.name,
        page=page,
        limit=limit,
        records=total,
        returned=len(data),
    )

    return Page(
        pagination=Pagination(current=page, limit=limit, records=total, pages=pages),
        data=data,
    )
