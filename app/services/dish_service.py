"""Dish catalog service helpers shared by API and HTML routes."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.dish import Dish
from app.schemas.dish import MAX_NUTRITION_AMOUNT, DishPayload, split_tag_text
from app.services.restaurant_service import first_validation_message

logger = logging.getLogger(__name__)

MAX_PRICE = Decimal("99999999.99")

NUTRITION_FIELDS: dict[str, str] = {
    "calories": "Calorias",
    "protein": "Proteína",
    "carbs": "Carboidratos",
    "fat": "Gorduras",
}


class DishValidationError(ValueError):
    """Raised when dish input is rejected before saving."""


def _parse_optional_amount(raw: str, label: str) -> int | None:
    value = raw.strip()
    if not value:
        return None
    try:
        amount = Decimal(value.replace(",", "."))
    except InvalidOperation as exc:
        raise DishValidationError(f"{label} deve ser um número.") from exc
    if not amount.is_finite():
        raise DishValidationError(f"{label} deve ser um número.")
    if amount < 0:
        raise DishValidationError(f"{label} não pode ser negativo.")
    if amount > MAX_NUTRITION_AMOUNT:
        raise DishValidationError(f"{label} deve ser no máximo {MAX_NUTRITION_AMOUNT}.")
    return int(amount)


def parse_dish_form(form: dict[str, str]) -> DishPayload:
    """Validate submitted dish form fields into a payload."""
    name = form.get("name", "").strip()
    if not name:
        raise DishValidationError("Nome do prato é obrigatório.")

    price_raw = form.get("price", "").strip().replace(",", ".")
    try:
        price = Decimal(price_raw)
    except InvalidOperation as exc:
        raise DishValidationError("Preço inválido.") from exc
    if not price.is_finite() or price <= 0:
        raise DishValidationError("Preço deve ser maior que zero.")
    if price > MAX_PRICE:
        raise DishValidationError("Preço inválido.")

    nutrition = {field: _parse_optional_amount(form.get(field, ""), label) for field, label in NUTRITION_FIELDS.items()}
    try:
        return DishPayload.model_validate(
            {
                "name": name,
                "description": form.get("description", "").strip(),
                "full_description": form.get("full_description", "").strip(),
                "price": price.quantize(Decimal("0.01")),
                "image_url": form.get("image_url"),
                "tags": split_tag_text(form.get("tags", "")),
                "diet_tags": split_tag_text(form.get("diet_tags", "")),
                "is_available": form.get("is_available") in {"true", "on", "1"},
                **nutrition,
            }
        )
    except ValidationError as exc:
        raise DishValidationError(first_validation_message(exc)) from exc


def list_dishes(db: Session, restaurant_id: str) -> list[Dish]:
    """Return the full catalog for one restaurant, newest first."""
    return list(
        db.scalars(
            select(Dish)
            .where(Dish.restaurant_id == restaurant_id)
            .order_by(Dish.created_at.desc(), Dish.id.desc())
        ).all()
    )


def list_available_dishes(db: Session, restaurant_id: str) -> list[Dish]:
    """Return customer-visible dishes for one restaurant, newest first."""
    return list(
        db.scalars(
            select(Dish)
            .where(Dish.restaurant_id == restaurant_id, Dish.is_available.is_(True))
            .order_by(Dish.created_at.desc(), Dish.id.desc())
        ).all()
    )


def get_dish(db: Session, restaurant_id: str, dish_id: str) -> Dish | None:
    """Return a dish only when it belongs to the given restaurant."""
    return db.scalar(select(Dish).where(Dish.id == dish_id, Dish.restaurant_id == restaurant_id).limit(1))


def _apply_payload(dish: Dish, payload: DishPayload) -> None:
    dish.name = payload.name
    dish.description = payload.description
    dish.full_description = payload.full_description
    dish.price = payload.price
    dish.image_url = payload.image_url
    dish.calories = payload.calories
    dish.protein = payload.protein
    dish.carbs = payload.carbs
    dish.fat = payload.fat
    dish.tags = list(payload.tags)
    dish.diet_tags = list(payload.diet_tags)
    dish.is_available = payload.is_available


def create_dish(db: Session, restaurant_id: str, payload: DishPayload) -> Dish:
    """Create and persist a dish for a restaurant."""
    dish = Dish(restaurant_id=restaurant_id)
    _apply_payload(dish, payload)
    db.add(dish)
    db.commit()
    db.refresh(dish)
    logger.info("[MENU] Dish created dish_id=%s restaurant_id=%s", dish.id, restaurant_id)
    return dish


def update_dish(db: Session, restaurant_id: str, dish_id: str, payload: DishPayload) -> Dish | None:
    dish = get_dish(db, restaurant_id, dish_id)
    if dish is None:
        return None
    _apply_payload(dish, payload)
    db.commit()
    db.refresh(dish)
    return dish


def toggle_dish_availability(db: Session, restaurant_id: str, dish_id: str) -> Dish | None:
    """Flip availability and persist the change."""
    dish = get_dish(db, restaurant_id, dish_id)
    if dish is None:
        return None
    dish.is_available = not dish.is_available
    db.commit()
    db.refresh(dish)
    return dish


def delete_dish(db: Session, restaurant_id: str, dish_id: str) -> bool:
    dish = get_dish(db, restaurant_id, dish_id)
    if dish is None:
        return False
    db.delete(dish)
    db.commit()
    logger.info("[MENU] Dish deleted dish_id=%s restaurant_id=%s", dish_id, restaurant_id)
    return True
