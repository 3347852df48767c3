"""Registry of every listing the API serves."""

from typing import Dict, Optional

from listing_api.catalog.base import NOT_DELETED, EntityListing, tenant_scope
from listing_api.catalog.healthcare import appointments, insurance_policies
from listing_api.catalog.lms import announcements
from listing_api.catalog.recipe_sharing import store_ingredient_prices
from listing_api.catalog.task_management import tasks

LISTINGS: Dict[str, EntityListing] = {
    listing.name: listing
    for listing in (
        insurance_policies,
        appointments,
        announcements,
        tasks,
        store_ingredient_prices,
    )
}


def get_listing(name: str) -> Optional[EntityListing]:
    return LISTINGS.get(name)


__all__ = [
    "LISTINGS",
    "NOT_DELETED",
    "EntityListing",
    "get_listing",
    "tenant_scope",
]
