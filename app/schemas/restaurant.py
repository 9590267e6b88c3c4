"""Restaurant settings and public menu schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.dish import DishResponse
from app.services.theme_service import CardSize, HeaderStyle, is_hex_color


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class RestaurantSettingsPayload(BaseModel):
    """Owner-editable restaurant profile and layout."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    logo_url: str | None = None
    font_family: str = Field(default="Inter", min_length=1, max_length=100)
    header_style: HeaderStyle = HeaderStyle.LOGO_NAME
    background_color: str | None = None
    background_image_url: str | None = None
    card_background_color: str | None = None
    card_size: CardSize = CardSize.MEDIUM

    @field_validator("name", "font_family", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", "logo_url", "background_image_url", mode="before")
    @classmethod
    def _optional_text(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("background_color", "card_background_color", mode="before")
    @classmethod
    def _optional_color(cls, value: object) -> object:
        value = _blank_to_none(value)
        if value is not None and not is_hex_color(str(value)):
            raise ValueError("Cor inválida, use o formato #rrggbb")
        return value


class ColorPayload(BaseModel):
    """Primary/secondary brand colors."""

    primary_color: str
    secondary_color: str

    @field_validator("primary_color", "secondary_color", mode="before")
    @classmethod
    def _hex_color(cls, value: object) -> object:
        value = value.strip() if isinstance(value, str) else value
        if not is_hex_color(str(value)):
            raise ValueError("Cor inválida, use o formato #rrggbb")
        return str(value).lower()


class BackgroundResponse(BaseModel):
    kind: str
    color: str | None
    image_url: str | None
    overlay: bool


class ThemeResponse(BaseModel):
    """Serialized theme plan."""

    header_variant: HeaderStyle
    font_family: str
    card_size: CardSize
    card_grid_class: str
    card_width_class: str
    primary_color: str
    secondary_color: str
    title_color: str
    card_background_color: str | None
    background: BackgroundResponse


class RestaurantResponse(BaseModel):
    """Serialized restaurant record."""

    id: str
    name: str
    description: str | None
    logo_url: str | None
    primary_color: str | None
    secondary_color: str | None
    font_family: str | None
    header_style: str | None
    background_color: str | None
    background_image_url: str | None
    card_background_color: str | None
    card_size: str | None

    model_config = ConfigDict(from_attributes=True)


class RestaurantDetailResponse(BaseModel):
    restaurant: RestaurantResponse
    theme: ThemeResponse


class MenuBoundsResponse(BaseModel):
    max_price: Decimal
    max_calories: int
    max_carbs: int


class PublicMenuResponse(BaseModel):
    """Filtered public menu with the facets needed to render filter controls."""

    restaurant_id: str
    total: int
    dishes: list[DishResponse]
    bounds: MenuBoundsResponse
    available_diet_tags: list[str]
    available_tags: list[str]
    has_active_filters: bool


class RestaurantCreateRequest(BaseModel):
    """Payload for creating the owner's restaurant."""

    name: str = Field(default="Meu Restaurante", min_length=1, max_length=255)
    description: str | None = "Descrição do restaurante"
