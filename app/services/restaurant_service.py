"""Restaurant profile, ownership and appearance helpers."""

from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.restaurant import Restaurant, RestaurantOwner
from app.models.user import User
from app.schemas.restaurant import ColorPayload, RestaurantSettingsPayload
from app.services.theme_service import PRESET_THEMES

logger = logging.getLogger(__name__)

DEFAULT_NEW_RESTAURANT_NAME = "Meu Restaurante"
DEFAULT_NEW_RESTAURANT_DESCRIPTION = "Descrição do restaurante"


class RestaurantValidationError(ValueError):
    """Raised when restaurant settings input is rejected before saving."""


def first_validation_message(exc: ValidationError) -> str:
    """Return a readable message for the first pydantic error."""
    error = exc.errors()[0]
    ctx_error = (error.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error.get('msg', 'valor inválido')}"


def get_restaurant(db: Session, restaurant_id: str) -> Restaurant | None:
    return db.get(Restaurant, restaurant_id)


def get_owned_restaurant(db: Session, user_id: str) -> Restaurant | None:
    """Return the restaurant linked to the user, if any."""
    return db.scalar(
        select(Restaurant)
        .join(RestaurantOwner, RestaurantOwner.restaurant_id == Restaurant.id)
        .where(RestaurantOwner.user_id == user_id)
        .order_by(RestaurantOwner.created_at.asc())
        .limit(1)
    )


def is_owner(db: Session, user_id: str | None, restaurant_id: str) -> bool:
    if not user_id:
        return False
    grant = db.scalar(
        select(RestaurantOwner.id)
        .where(RestaurantOwner.user_id == user_id, RestaurantOwner.restaurant_id == restaurant_id)
        .limit(1)
    )
    return grant is not None


def create_restaurant_for_owner(
    db: Session,
    user: User,
    name: str = DEFAULT_NEW_RESTAURANT_NAME,
    description: str | None = DEFAULT_NEW_RESTAURANT_DESCRIPTION,
) -> Restaurant:
    """Create a restaurant and its ownership row; returns the existing one when present."""
    existing = get_owned_restaurant(db, user.id)
    if existing is not None:
        return existing
    restaurant = Restaurant(name=name, description=description)
    db.add(restaurant)
    db.flush()
    db.add(RestaurantOwner(user_id=user.id, restaurant_id=restaurant.id, role="owner"))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = get_owned_restaurant(db, user.id)
        if existing is None:
            raise
        logger.info("[RESTAURANT] Concurrent create resolved to restaurant_id=%s for user_id=%s", existing.id, user.id)
        return existing
    db.refresh(restaurant)
    logger.info("[RESTAURANT] Created restaurant_id=%s for user_id=%s", restaurant.id, user.id)
    return restaurant


def parse_settings_form(form: dict[str, str]) -> RestaurantSettingsPayload:
    """Validate submitted settings form fields."""
    if not form.get("name", "").strip():
        raise RestaurantValidationError("O nome do restaurante é obrigatório.")
    try:
        return RestaurantSettingsPayload.model_validate(
            {
                "name": form.get("name", ""),
                "description": form.get("description"),
                "logo_url": form.get("logo_url"),
                "font_family": form.get("font_family") or "Inter",
                "header_style": form.get("header_style") or "logo-name",
                "background_color": form.get("background_color"),
                "background_image_url": form.get("background_image_url"),
                "card_background_color": form.get("card_background_color"),
                "card_size": form.get("card_size") or "medium",
            }
        )
    except ValidationError as exc:
        raise RestaurantValidationError(first_validation_message(exc)) from exc


def update_restaurant_settings(db: Session, restaurant: Restaurant, payload: RestaurantSettingsPayload) -> Restaurant:
    """Persist profile and layout fields."""
    restaurant.name = payload.name
    restaurant.description = payload.description
    restaurant.logo_url = payload.logo_url
    restaurant.font_family = payload.font_family
    restaurant.header_style = payload.header_style.value
    restaurant.background_color = payload.background_color
    restaurant.background_image_url = payload.background_image_url
    restaurant.card_background_color = payload.card_background_color
    restaurant.card_size = payload.card_size.value
    db.commit()
    db.refresh(restaurant)
    return restaurant


def parse_color_form(form: dict[str, str]) -> ColorPayload:
    """Validate submitted colors; a preset theme name wins over explicit colors."""
    preset_name = form.get("preset", "").strip()
    if preset_name:
        preset = PRESET_THEMES.get(preset_name)
        if preset is None:
            raise RestaurantValidationError("Tema desconhecido.")
        return ColorPayload(primary_color=preset[0], secondary_color=preset[1])
    try:
        return ColorPayload.model_validate(
            {
                "primary_color": form.get("primary_color", ""),
                "secondary_color": form.get("secondary_color", ""),
            }
        )
    except ValidationError as exc:
        raise RestaurantValidationError(first_validation_message(exc)) from exc


def update_restaurant_colors(db: Session, restaurant: Restaurant, payload: ColorPayload) -> Restaurant:
    restaurant.primary_color = payload.primary_color
    restaurant.secondary_color = payload.secondary_color
    db.commit()
    db.refresh(restaurant)
    return restaurant


def menu_url(base_url: str, restaurant_id: str) -> str:
    """Public, shareable menu address for a restaurant."""
    return f"{base_url.rstrip('/')}/menu/{restaurant_id}"
