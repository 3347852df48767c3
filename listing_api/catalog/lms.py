"""Enterprise LMS listings."""

from datetime import datetime

from listing_api.catalog.base import NOT_DELETED, EntityListing, tenant_scope
from listing_api.models import AnnouncementModel
from listing_api.models.schemas.lms import AnnouncementSummary
from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType

announcements = EntityListing(
    name="announcements",
    spec=EntitySearchSpec(
        name="announcements",
        scope=[tenant_scope("tenant_id"), NOT_DELETED],
        filterable_fields=[
            FilterField("status", value_type=str),
            FilterField("creator_id", value_type=str),
            FilterField("title", MatchType.CONTAINS),
            FilterField("created_at", MatchType.RANGE, value_type=datetime),
        ],
        sortable_fields=["created_at", "updated_at", "title", "status"],
        default_sort_field="created_at",
        searchable_fields=["title", "body"],
        to_summary=AnnouncementSummary.model_validate,
    ),
    model=AnnouncementModel,
    summary_schema=AnnouncementSummary,
    roles=frozenset({"organization_admin", "content_creator_instructor"}),
    description="Tenant announcements",
)
