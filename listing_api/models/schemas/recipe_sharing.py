"""Recipe sharing summary schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class StoreIngredientPriceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    grocery_store_id: str
    ingredient_id: str
    price: float
    available: bool
    last_updated: datetime
    created_at: datetime
