"""Healthcare platform listings."""

from datetime import date, datetime

from listing_api.catalog.base import NOT_DELETED, EntityListing, tenant_scope
from listing_api.models import AppointmentModel, InsurancePolicyModel
from listing_api.models.schemas.healthcare import AppointmentSummary, InsurancePolicySummary
from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType

HEALTHCARE_STAFF_ROLES = frozenset(
    {"organization_admin", "department_head", "doctor", "nurse", "front_desk"}
)

insurance_policies = EntityListing(
    name="insurance-policies",
    spec=EntitySearchSpec(
        name="insurance-policies",
        scope=[tenant_scope("organization_id"), NOT_DELETED],
        filterable_fields=[
            FilterField("patient_id", value_type=str),
            FilterField("policy_status", value_type=str),
            FilterField("plan_type", value_type=str),
            FilterField("policy_number", MatchType.CONTAINS),
            FilterField("payer_name", MatchType.CONTAINS),
            FilterField(
                "coverage_start", MatchType.RANGE, column="coverage_start_date", value_type=date
            ),
            FilterField(
                "coverage_end", MatchType.RANGE, column="coverage_end_date", value_type=date
            ),
        ],
        sortable_fields=[
            "created_at",
            "policy_number",
            "plan_type",
            "payer_name",
            "policy_status",
            "coverage_start_date",
            "coverage_end_date",
        ],
        default_sort_field="created_at",
        to_summary=InsurancePolicySummary.model_validate,
    ),
    model=InsurancePolicyModel,
    summary_schema=InsurancePolicySummary,
    roles=HEALTHCARE_STAFF_ROLES,
    description="Insurance policies on file for the organization's patients",
)

appointments = EntityListing(
    name="appointments",
    spec=EntitySearchSpec(
        name="appointments",
        scope=[tenant_scope("organization_id"), NOT_DELETED],
        filterable_fields=[
            FilterField("patient_id", value_type=str),
            FilterField("provider_id", value_type=str),
            FilterField("status", value_type=str),
            FilterField("start_time", MatchType.RANGE, value_type=datetime),
        ],
        sortable_fields=["created_at", "start_time", "status"],
        default_sort_field="created_at",
        to_summary=AppointmentSummary.model_validate,
    ),
    model=AppointmentModel,
    summary_schema=AppointmentSummary,
    roles=HEALTHCARE_STAFF_ROLES,
    description="Scheduled, completed and cancelled appointments",
)
