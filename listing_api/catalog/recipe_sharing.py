"""Recipe sharing listings."""

from listing_api.catalog.base import NOT_DELETED, EntityListing
from listing_api.models import StoreIngredientPriceModel
from listing_api.models.schemas.recipe_sharing import StoreIngredientPriceSummary
from listing_api.search.spec import EntitySearchSpec, FilterField, MatchType

store_ingredient_prices = EntityListing(
    name="store-ingredient-prices",
    spec=EntitySearchSpec(
        name="store-ingredient-prices",
        scope=[NOT_DELETED],
        filterable_fields=[
            FilterField("grocery_store_id", value_type=str),
            FilterField("ingredient_id", value_type=str),
            FilterField("available", value_type=bool),
            FilterField("price", MatchType.RANGE, value_type=float),
        ],
        sortable_fields=["created_at", "price", "last_updated"],
        default_sort_field="created_at",
        to_summary=StoreIngredientPriceSummary.model_validate,
    ),
    model=StoreIngredientPriceModel,
    summary_schema=StoreIngredientPriceSummary,
    roles=frozenset({"regular_user", "premium_user", "moderator"}),
    description="Ingredient prices reported per grocery store",
)
