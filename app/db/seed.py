"""Database seeding helpers."""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.dish import Dish
from app.models.restaurant import Restaurant

logger = logging.getLogger(__name__)

DEMO_DISHES: list[dict] = [
    {
        "name": "Salmão Grelhado",
        "description": "Salmão com legumes na manteiga de ervas",
        "full_description": "Filé de salmão grelhado servido com legumes salteados na manteiga de ervas finas e arroz integral.",
        "price": Decimal("42.90"),
        "calories": 420,
        "protein": 35,
        "carbs": 18,
        "fat": 22,
        "tags": ["Rico em Proteína", "Ômega 3"],
        "diet_tags": ["sem-gluten"],
    },
    {
        "name": "Bowl Vegano",
        "description": "Quinoa, grão-de-bico, abacate e folhas",
        "full_description": "Bowl com quinoa, grão-de-bico assado, abacate, folhas verdes e molho de tahine.",
        "price": Decimal("28.50"),
        "calories": 380,
        "protein": 14,
        "carbs": 45,
        "fat": 16,
        "tags": ["Leve"],
        "diet_tags": ["vegano", "sem-gluten", "sem-lactose"],
    },
    {
        "name": "Frango Low Carb",
        "description": "Peito de frango com purê de couve-flor",
        "full_description": "Peito de frango grelhado acompanhado de purê cremoso de couve-flor e brócolis no vapor.",
        "price": Decimal("34.00"),
        "calories": 350,
        "protein": 40,
        "carbs": 9,
        "fat": 14,
        "tags": ["Rico em Proteína"],
        "diet_tags": ["low-carb", "keto", "sem-gluten"],
    },
    {
        "name": "Risoto de Cogumelos",
        "description": "Arroz arbóreo com mix de cogumelos",
        "full_description": "Risoto cremoso de arroz arbóreo com shiitake, shimeji e parmesão.",
        "price": Decimal("39.90"),
        "calories": 610,
        "protein": 16,
        "carbs": 72,
        "fat": 24,
        "tags": ["Especial da Casa"],
        "diet_tags": ["vegetariano"],
    },
]


def ensure_demo_restaurant(session: Session) -> bool:
    """Create the demo restaurant and dishes in development only.

    Returns:
        bool: True when the demo restaurant was created by this call.
    """
    if settings.app_env != "dev" or not settings.seed_demo:
        return False
    if session.get(Restaurant, settings.demo_restaurant_id) is not None:
        return False

    restaurant = Restaurant(
        id=settings.demo_restaurant_id,
        name="Cozinha Saudável",
        description="Pratos frescos e balanceados, preparados todos os dias.",
        primary_color="#16a34a",
        secondary_color="#f97316",
        header_style="logo-name",
        font_family="Inter",
        card_size="medium",
    )
    session.add(restaurant)
    base_time = datetime.now(timezone.utc)
    # Oldest first so the newest-first listing shows them in declaration order.
    for offset, data in enumerate(reversed(DEMO_DISHES)):
        session.add(Dish(restaurant_id=restaurant.id, created_at=base_time + timedelta(seconds=offset), **data))
    session.commit()
    logger.info("[BOOTSTRAP] Demo restaurant created id=%s", restaurant.id)
    return True
