"""Resolve restaurant layout configuration into a rendering plan."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

from app.models.restaurant import (
    DEFAULT_CARD_SIZE,
    DEFAULT_FONT_FAMILY,
    DEFAULT_HEADER_STYLE,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    Restaurant,
)

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")
DEFAULT_TITLE_COLOR = "#1f2937"
GENERIC_FONT_FALLBACK = "sans-serif"


class HeaderStyle(str, Enum):
    LOGO_ONLY = "logo-only"
    NAME_ONLY = "name-only"
    LOGO_NAME = "logo-name"
    NAME_LOGO = "name-logo"
    SIDE_BY_SIDE = "side-by-side"
    BANNER = "banner"


class CardSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


HEADER_STYLE_LABELS: dict[HeaderStyle, str] = {
    HeaderStyle.LOGO_ONLY: "Apenas logo",
    HeaderStyle.NAME_ONLY: "Apenas nome",
    HeaderStyle.LOGO_NAME: "Logo acima do nome",
    HeaderStyle.NAME_LOGO: "Nome acima da logo",
    HeaderStyle.SIDE_BY_SIDE: "Logo ao lado do nome",
    HeaderStyle.BANNER: "Banner colorido",
}

CARD_SIZE_LABELS: dict[CardSize, str] = {
    CardSize.SMALL: "Pequeno (3 por linha)",
    CardSize.MEDIUM: "Médio (2 por linha)",
    CardSize.LARGE: "Grande (1 por linha)",
}

# Grid columns per row and max card width for each density.
CARD_GRID_CLASSES: dict[CardSize, str] = {
    CardSize.SMALL: "grid-3",
    CardSize.MEDIUM: "grid-2",
    CardSize.LARGE: "grid-1",
}
CARD_WIDTH_CLASSES: dict[CardSize, str] = {
    CardSize.SMALL: "card-sm",
    CardSize.MEDIUM: "card-md",
    CardSize.LARGE: "card-lg",
}

PRESET_THEMES: dict[str, tuple[str, str]] = {
    "Verde Natureza": ("#16a34a", "#f97316"),
    "Azul Oceano": ("#0ea5e9", "#8b5cf6"),
    "Vermelho Elegante": ("#dc2626", "#fbbf24"),
    "Roxo Moderno": ("#7c3aed", "#06b6d4"),
    "Rosa Delicado": ("#ec4899", "#10b981"),
    "Laranja Vibrante": ("#ea580c", "#3b82f6"),
}

DIET_TAG_LABELS: dict[str, str] = {
    "vegano": "Vegano",
    "vegetariano": "Vegetariano",
    "low-carb": "Low Carb",
    "sem-gluten": "Sem Glúten",
    "sem-lactose": "Sem Lactose",
    "keto": "Keto",
}
GENERIC_TAG_STYLE = "tag-generic"


class DietTagDisplay(BaseModel):
    label: str
    style_key: str

    model_config = ConfigDict(frozen=True)


class BackgroundStyle(BaseModel):
    """Page background: a solid color, a cover-fit image, or nothing."""

    color: str | None = None
    image_url: str | None = None
    overlay: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def kind(self) -> str:
        if self.image_url:
            return "image"
        if self.color:
            return "color"
        return "none"


class ThemePlan(BaseModel):
    """Concrete rendering decisions for one restaurant."""

    header_variant: HeaderStyle
    font_family: str
    card_size: CardSize
    card_grid_class: str
    card_width_class: str
    primary_color: str
    secondary_color: str
    title_color: str
    card_background_color: str | None = None
    background: BackgroundStyle = BackgroundStyle()

    model_config = ConfigDict(frozen=True)

    @property
    def banner_gradient(self) -> str:
        return f"linear-gradient(135deg, {self.primary_color}20 0%, {self.secondary_color}20 100%)"

    def container_style(self) -> str:
        """Inline CSS for the page container."""
        rules: list[str] = []
        if self.background.color:
            rules.append(f"background-color: {self.background.color}")
        if self.background.image_url:
            rules.extend(
                [
                    f"background-image: url('{self.background.image_url}')",
                    "background-size: cover",
                    "background-position: center",
                    "background-attachment: fixed",
                    "background-repeat: no-repeat",
                ]
            )
        rules.append(f"font-family: {self.font_family}")
        return "; ".join(rules)

    def card_style(self) -> str:
        rules = [f"font-family: {self.font_family}"]
        if self.card_background_color:
            rules.insert(0, f"background-color: {self.card_background_color}")
        return "; ".join(rules)


def is_hex_color(value: str | None) -> bool:
    return bool(value) and HEX_COLOR_PATTERN.match(str(value)) is not None


def _color_or(value: str | None, default: str | None) -> str | None:
    return value if is_hex_color(value) else default


def resolve_header_style(value: str | None) -> HeaderStyle:
    try:
        return HeaderStyle(str(value or "").strip())
    except ValueError:
        return HeaderStyle(DEFAULT_HEADER_STYLE)


def resolve_card_size(value: str | None) -> CardSize:
    try:
        return CardSize(str(value or "").strip())
    except ValueError:
        return CardSize(DEFAULT_CARD_SIZE)


def resolve_font_family(value: str | None) -> str:
    family = str(value or "").strip() or DEFAULT_FONT_FAMILY
    return f"{family}, {GENERIC_FONT_FALLBACK}"


def resolve_theme(restaurant: Restaurant) -> ThemePlan:
    """Map restaurant configuration to a rendering plan; never fails on bad values."""
    card_size = resolve_card_size(restaurant.card_size)
    primary = _color_or(restaurant.primary_color, None)
    image_url = (restaurant.background_image_url or "").strip() or None
    return ThemePlan(
        header_variant=resolve_header_style(restaurant.header_style),
        font_family=resolve_font_family(restaurant.font_family),
        card_size=card_size,
        card_grid_class=CARD_GRID_CLASSES[card_size],
        card_width_class=CARD_WIDTH_CLASSES[card_size],
        primary_color=primary or DEFAULT_PRIMARY_COLOR,
        secondary_color=_color_or(restaurant.secondary_color, DEFAULT_SECONDARY_COLOR),
        title_color=primary or DEFAULT_TITLE_COLOR,
        card_background_color=_color_or(restaurant.card_background_color, None),
        background=BackgroundStyle(
            color=_color_or(restaurant.background_color, None),
            image_url=image_url,
            overlay=image_url is not None,
        ),
    )


def diet_tag_display(tag: str) -> DietTagDisplay:
    """Label and style key for a diet tag; unknown tags keep their raw text."""
    label = DIET_TAG_LABELS.get(tag)
    if label is None:
        return DietTagDisplay(label=tag, style_key=GENERIC_TAG_STYLE)
    return DietTagDisplay(label=label, style_key=f"tag-{tag}")
