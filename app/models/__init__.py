"""Application models package."""

from app.models.dish import Dish
from app.models.restaurant import Restaurant, RestaurantOwner
from app.models.user import User

__all__ = ["User", "Restaurant", "RestaurantOwner", "Dish"]
