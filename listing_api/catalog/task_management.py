"""Task management listings."""

from datetime import datetime

from listing_api.catalog.base import NOT_DELETED, EntityListing
from listing_api.models import TaskModel
from listing_api.models.schemas.task_management import TaskSummary
from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType

tasks = EntityListing(
    name="tasks",
    spec=EntitySearchSpec(
        name="tasks",
        scope=[NOT_DELETED],
        filterable_fields=[
            FilterField("status_id", value_type=str),
            FilterField("priority_id", value_type=str),
            FilterField("creator_id", value_type=str),
            FilterField("project_id", value_type=str),
            FilterField("board_id", value_type=str),
            FilterField("title", MatchType.CONTAINS),
            FilterField("due_date", MatchType.RANGE, value_type=datetime),
        ],
        sortable_fields=["created_at", "updated_at", "title", "due_date"],
        default_sort_field="created_at",
        searchable_fields=["title", "description"],
        to_summary=TaskSummary.model_validate,
    ),
    model=TaskModel,
    summary_schema=TaskSummary,
    roles=frozenset({"pm", "pmo", "tpm", "developer", "designer", "qa"}),
    description="Tasks across projects and boards",
)
