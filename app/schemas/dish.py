"""Dish API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_NUTRITION_AMOUNT = 100_000


def split_tag_text(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Turn comma-separated text or a list into trimmed, de-duplicated tags."""
    if value is None:
        return []
    raw_values = value.split(",") if isinstance(value, str) else list(value)
    cleaned = [str(item).strip() for item in raw_values]
    return list(dict.fromkeys(item for item in cleaned if item))


class DishPayload(BaseModel):
    """Validated dish fields for create and update."""

    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    full_description: str = ""
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    image_url: str | None = None
    calories: int | None = Field(default=None, ge=0, le=MAX_NUTRITION_AMOUNT)
    protein: int | None = Field(default=None, ge=0, le=MAX_NUTRITION_AMOUNT)
    carbs: int | None = Field(default=None, ge=0, le=MAX_NUTRITION_AMOUNT)
    fat: int | None = Field(default=None, ge=0, le=MAX_NUTRITION_AMOUNT)
    tags: list[str] = Field(default_factory=list)
    diet_tags: list[str] = Field(default_factory=list)
    is_available: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("image_url", mode="before")
    @classmethod
    def _blank_image_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags", "diet_tags", mode="before")
    @classmethod
    def _split_tags(cls, value: object) -> list[str]:
        return split_tag_text(value)  # type: ignore[arg-type]


class DishResponse(BaseModel):
    """Serialized dish."""

    id: str
    restaurant_id: str
    name: str
    description: str | None
    full_description: str | None
    price: Decimal
    image_url: str | None
    calories: int | None
    protein: int | None
    carbs: int | None
    fat: int | None
    tags: list[str]
    diet_tags: list[str]
    is_available: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
