from typing import Callable, Dict, Optional

from listing_api.catalog import LISTINGS, EntityListing
from listing_api.core.exceptions import (
    AuthorizationError,
    ListingError,
    ResourceNotFoundError,
)
from listing_api.core.logging import get_service_logger
from listing_api.models.schemas.base import Page, PageRequest
from listing_api.search.backends.base import SearchBackend
from listing_api.search.backends.sql import SqlAlchemySearchBackend
from listing_api.search.context import CallerContext
from listing_api.search.engine import search

logger = get_service_logger("listing")

BackendFactory = Callable[[EntityListing], SearchBackend]


def sql_backend_factory(listing: EntityListing) -> SearchBackend:
    """Default backend: the listing's ORM model through the shared database."""
    return SqlAlchemySearchBackend.for_spec(listing.model, listing.spec)


class ListingService:
    """Service resolving listings by name and running them for a caller."""

    def __init__(
        self,
        listings: Optional[Dict[str, EntityListing]] = None,
        backend_factory: Optional[BackendFactory] = None,
    ):
        self.logger = logger
        self.listings = LISTINGS if listings is None else listings
        self.backend_factory = backend_factory or sql_backend_factory

    def get_listing(self, resource: str) -> EntityListing:
        """
        Look up a listing by name.

        Raises:
            ResourceNotFoundError: If no listing has that name
        """
        listing = self.listings.get(resource)
        if listing is None:
            raise ResourceNotFoundError(f"Listing '{resource}' not found", resource=resource)
        return listing

    def check_access(self, listing: EntityListing, caller: CallerContext) -> None:
        if not listing.allows(caller.role):
            self.logger.warning(
                "Listing access denied",
                listing=listing.name,
                user_id=caller.user_id,
                role=caller.role,
            )
            raise AuthorizationError(
                f"Role '{caller.role}' may not list {listing.name}",
                details={"listing": listing.name},
            )

    async def list_entities(
        self,
        resource: str,
        request: Optional[PageRequest],
        caller: CallerContext,
    ) -> Page:
        """
        Return one page of a listing for the caller.

        Args:
            resource: Listing name, e.g. ``tasks``
            request: Paging, filter and sort parameters (defaults when None)
            caller: Authenticated caller

        Returns:
            Page of summary records

        Raises:
            ResourceNotFoundError: If the listing does not exist
            AuthorizationError: If the caller's role or scope does not allow it
            ValidationError: If a filter value is malformed
            BackingStoreError: If the backing store read fails
        """
        listing = self.get_listing(resource)
        self.check_access(listing, caller)
        request = request or PageRequest()

        self.logger.info(
            "Listing entities",
            listing=listing.name,
            user_id=caller.user_id,
            tenant_id=caller.tenant_id,
            page=request.page,
            limit=request.limit,
            filter_keys=sorted(request.filters),
        )

        try:
            backend = self.backend_factory(listing)
            page = await search(request, listing.spec, context=caller, backend=backend)
        except ListingError as e:
            self.logger.warning(
                "Listing failed",
                listing=listing.name,
                error_code=e.error_code,
                error=e.message,
            )
            raise

        self.logger.info(
            "Listing completed",
            listing=listing.name,
            records=page.pagination.records,
            returned=len(page.data),
        )
        return page


# Global service instance
listing_service = ListingService()
