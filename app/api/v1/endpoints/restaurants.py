"""Restaurant profile, public menu and owner dish endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.restaurant import Restaurant
from app.models.user import User
from app.schemas.dish import DishPayload, DishResponse
from app.schemas.restaurant import (
    BackgroundResponse,
    ColorPayload,
    MenuBoundsResponse,
    PublicMenuResponse,
    RestaurantCreateRequest,
    RestaurantDetailResponse,
    RestaurantResponse,
    RestaurantSettingsPayload,
    ThemeResponse,
)
from app.services.dish_service import (
    create_dish,
    delete_dish,
    list_available_dishes,
    list_dishes,
    toggle_dish_availability,
    update_dish,
)
from app.services.menu_view import MenuQuery, build_store
from app.services.restaurant_service import (
    create_restaurant_for_owner,
    get_owned_restaurant,
    get_restaurant,
    update_restaurant_colors,
    update_restaurant_settings,
)
from app.services.theme_service import ThemePlan, resolve_theme

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _serialize_theme(plan: ThemePlan) -> ThemeResponse:
    return ThemeResponse(
        header_variant=plan.header_variant,
        font_family=plan.font_family,
        card_size=plan.card_size,
        card_grid_class=plan.card_grid_class,
        card_width_class=plan.card_width_class,
        primary_color=plan.primary_color,
        secondary_color=plan.secondary_color,
        title_color=plan.title_color,
        card_background_color=plan.card_background_color,
        background=BackgroundResponse(
            kind=plan.background.kind,
            color=plan.background.color,
            image_url=plan.background.image_url,
            overlay=plan.background.overlay,
        ),
    )


def _serialize_restaurant(restaurant: Restaurant) -> RestaurantDetailResponse:
    return RestaurantDetailResponse(
        restaurant=RestaurantResponse.model_validate(restaurant),
        theme=_serialize_theme(resolve_theme(restaurant)),
    )


def _require_owned_restaurant(db: Session, current_user: User) -> Restaurant:
    restaurant = get_owned_restaurant(db, current_user.id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return restaurant


@router.get("/me", response_model=RestaurantDetailResponse)
def get_my_restaurant(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RestaurantDetailResponse:
    return _serialize_restaurant(_require_owned_restaurant(db, current_user))


@router.post("/me", response_model=RestaurantDetailResponse, status_code=status.HTTP_201_CREATED)
def create_my_restaurant(
    payload: RestaurantCreateRequest | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RestaurantDetailResponse:
    """Create the caller's restaurant; an existing one is returned unchanged."""
    payload = payload or RestaurantCreateRequest()
    restaurant = create_restaurant_for_owner(db, current_user, name=payload.name, description=payload.description)
    return _serialize_restaurant(restaurant)


@router.put("/me", response_model=RestaurantDetailResponse)
def update_my_restaurant(
    payload: RestaurantSettingsPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RestaurantDetailResponse:
    restaurant = _require_owned_restaurant(db, current_user)
    return _serialize_restaurant(update_restaurant_settings(db, restaurant, payload))


@router.put("/me/colors", response_model=RestaurantDetailResponse)
def update_my_colors(
    payload: ColorPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RestaurantDetailResponse:
    restaurant = _require_owned_restaurant(db, current_user)
    return _serialize_restaurant(update_restaurant_colors(db, restaurant, payload))


@router.get("/me/dishes", response_model=list[DishResponse])
def list_my_dishes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[DishResponse]:
    restaurant = _require_owned_restaurant(db, current_user)
    return [DishResponse.model_validate(dish) for dish in list_dishes(db, restaurant.id)]


@router.post("/me/dishes", response_model=DishResponse, status_code=status.HTTP_201_CREATED)
def create_my_dish(
    payload: DishPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DishResponse:
    restaurant = _require_owned_restaurant(db, current_user)
    return DishResponse.model_validate(create_dish(db, restaurant.id, payload))


@router.put("/me/dishes/{dish_id}", response_model=DishResponse)
def update_my_dish(
    dish_id: str,
    payload: DishPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DishResponse:
    restaurant = _require_owned_restaurant(db, current_user)
    dish = update_dish(db, restaurant.id, dish_id, payload)
    if dish is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dish not found")
    return DishResponse.model_validate(dish)


@router.post("/me/dishes/{dish_id}/toggle", response_model=DishResponse)
def toggle_my_dish(
    dish_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DishResponse:
    restaurant = _require_owned_restaurant(db, current_user)
    dish = toggle_dish_availability(db, restaurant.id, dish_id)
    if dish is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dish not found")
    return DishResponse.model_validate(dish)


@router.delete("/me/dishes/{dish_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_dish(
    dish_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    restaurant = _require_owned_restaurant(db, current_user)
    if not delete_dish(db, restaurant.id, dish_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Dish not found")


@router.get("/{restaurant_id}", response_model=RestaurantDetailResponse)
def get_public_restaurant(restaurant_id: str, db: Session = Depends(get_db)) -> RestaurantDetailResponse:
    restaurant = get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    return _serialize_restaurant(restaurant)


@router.get("/{restaurant_id}/menu", response_model=PublicMenuResponse)
def get_public_menu(restaurant_id: str, request: Request, db: Session = Depends(get_db)) -> PublicMenuResponse:
    """Return available dishes filtered by the menu query parameters."""
    restaurant = get_restaurant(db, restaurant_id)
    if restaurant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Restaurant not found")
    params = {key: request.query_params.getlist(key) for key in request.query_params.keys()}
    store = build_store(list_available_dishes(db, restaurant.id), MenuQuery.from_multi_dict(params))
    visible = store.visible_dishes
    return PublicMenuResponse(
        restaurant_id=restaurant.id,
        total=len(visible),
        dishes=[DishResponse.model_validate(dish) for dish in visible],
        bounds=MenuBoundsResponse(
            max_price=store.bounds.max_price,
            max_calories=store.bounds.max_calories,
            max_carbs=store.bounds.max_carbs,
        ),
        available_diet_tags=store.available_diet_tags,
        available_tags=store.available_tags,
        has_active_filters=store.has_active_filters,
    )
