"""Listing endpoints.

One ``PATCH /<listing>`` route is registered per catalog entry. The body is
an optional ``PageRequest``; an empty body returns the first page with the
listing's defaults.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from listing_api.catalog import LISTINGS, EntityListing
from listing_api.core.security import get_caller_context
from listing_api.models.schemas.base import Page, PageRequest
from listing_api.models.schemas.errors import LISTING_ERROR_RESPONSES
from listing_api.search.context import CallerContext
from listing_api.services.listing_service import listing_service

router = APIRouter()


def _make_endpoint(listing: EntityListing):
    async def list_endpoint(
        request: Optional[PageRequest] = Body(default=None),
        caller: CallerContext = Depends(get_caller_context),
    ) -> Page:
        return await listing_service.list_entities(listing.name, request, caller)

    list_endpoint.__name__ = f"list_{listing.name.replace('-', '_')}"
    list_endpoint.__doc__ = listing.description
    return list_endpoint


for _listing in LISTINGS.values():
    router.add_api_route(
        f"/{_listing.name}",
        _make_endpoint(_listing),
        methods=["PATCH"],
        response_model=Page[_listing.summary_schema],
        responses=LISTING_ERROR_RESPONSES,
        summary=f"List {_listing.name.replace('-', ' ')}",
    )
