"""Schema exports."""

from app.schemas.auth import AuthUserResponse, LoginRequest, RegisterRequest, TokenResponse
from app.schemas.dish import DishPayload, DishResponse
from app.schemas.restaurant import (
    ColorPayload,
    PublicMenuResponse,
    RestaurantCreateRequest,
    RestaurantDetailResponse,
    RestaurantResponse,
    RestaurantSettingsPayload,
    ThemeResponse,
)

__all__ = [
    "AuthUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "DishPayload",
    "DishResponse",
    "ColorPayload",
    "PublicMenuResponse",
    "RestaurantCreateRequest",
    "RestaurantDetailResponse",
    "RestaurantResponse",
    "RestaurantSettingsPayload",
    "ThemeResponse",
]
