"""Pydantic schemas for API requests and responses.

- base.py: listing request, pagination and page envelope
- healthcare.py, lms.py, task_management.py, recipe_sharing.py: summary DTOs
- errors.py: error response schemas
- validators.py: shared validator functions
"""

from listing_api.models.schemas.base import Page, PageRequest, Pagination, SortDirection
from listing_api.models.schemas.errors import APIErrorResponse, ErrorResponse
from listing_api.models.schemas.healthcare import AppointmentSummary, InsurancePolicySummary
from listing_api.models.schemas.lms import AnnouncementSummary
from listing_api.models.schemas.recipe_sharing import StoreIngredientPriceSummary
from listing_api.models.schemas.task_management import TaskSummary

__all__ = [
    "Page",
    "PageRequest",
    "Pagination",
    "SortDirection",
    "APIErrorResponse",
    "ErrorResponse",
    "AnnouncementSummary",
    "AppointmentSummary",
    "InsurancePolicySummary",
    "StoreIngredientPriceSummary",
    "TaskSummary",
]
