"""ORM models.

Importing this package registers every table on ``Base.metadata``.
"""

from listing_api.models.base import Base
from listing_api.models.healthcare import (
    AppointmentModel,
    AppointmentStatus,
    InsurancePolicyModel,
    PolicyStatus,
)
from listing_api.models.lms import AnnouncementModel, AnnouncementStatus
from listing_api.models.recipe_sharing import StoreIngredientPriceModel
from listing_api.models.task_management import TaskModel

__all__ = [
    "Base",
    "AnnouncementModel",
    "AnnouncementStatus",
    "AppointmentModel",
    "AppointmentStatus",
    "InsurancePolicyModel",
    "PolicyStatus",
    "StoreIngredientPriceModel",
    "TaskModel",
]
