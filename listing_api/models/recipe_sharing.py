"""Recipe sharing tables."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from listing_api.models.base import Base, IdMixin, SoftDeleteMixin, TimestampMixin, utc_now


class StoreIngredientPriceModel(IdMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "recipe_sharing_store_ingredient_prices"

    grocery_store_id: Mapped[str] = mapped_column(String(36), index=True)
    ingredient_id: Mapped[str] = mapped_column(String(36), index=True)
    price: Mapped[float] = mapped_column(Float)
    available: Mapped[bool] = mapped_column(Boolean, default=True)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
