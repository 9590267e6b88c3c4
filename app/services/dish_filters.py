"""In-memory dish filtering for the public menu.

Filtering is a pure function of the dish collection and a ``FilterCriteria``
value: categories are intersected (AND), values inside a multi-select
category are united (OR), and the input order is always preserved.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.models.dish import Dish

FALLBACK_MAX_PRICE: Decimal = Decimal("100")
FALLBACK_MAX_CALORIES: int = 1000
FALLBACK_MAX_CARBS: int = 100


class FilterBounds(BaseModel):
    """Upper limits that make every range filter fully open for a collection."""

    max_price: Decimal = FALLBACK_MAX_PRICE
    max_calories: int = FALLBACK_MAX_CALORIES
    max_carbs: int = FALLBACK_MAX_CARBS

    model_config = ConfigDict(frozen=True)


class FilterCriteria(BaseModel):
    """Current filter selections for one menu view.

    ``None`` upper bounds mean the range is open.
    """

    diet_tags: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    search: str = ""
    search_tags: bool = False
    price_min: Decimal = Decimal("0")
    price_max: Decimal | None = None
    calorie_min: int = 0
    calorie_max: int | None = None
    protein_min: int = Field(default=0)
    carbs_max: int | None = None

    model_config = ConfigDict(frozen=True)


def _normalized_values(values: Iterable[str] | None) -> list[str]:
    return [str(value) for value in (values or [])]


def _matches_search(dish: Dish, term: str, include_tags: bool) -> bool:
    haystacks = [dish.name or "", dish.description or ""]
    if include_tags:
        haystacks.extend(_normalized_values(dish.tags))
        haystacks.extend(_normalized_values(dish.diet_tags))
    return any(term in value.lower() for value in haystacks)


def _intersects(dish_values: Iterable[str] | None, selected: Sequence[str]) -> bool:
    present = set(_normalized_values(dish_values))
    return any(value in present for value in selected)


def _in_price_range(dish: Dish, criteria: FilterCriteria) -> bool:
    price = Decimal(str(dish.price))
    if price < criteria.price_min:
        return False
    return criteria.price_max is None or price <= criteria.price_max


def _in_calorie_range(dish: Dish, criteria: FilterCriteria) -> bool:
    if dish.calories is None:
        return True
    if dish.calories < criteria.calorie_min:
        return False
    return criteria.calorie_max is None or dish.calories <= criteria.calorie_max


def _meets_protein_minimum(dish: Dish, criteria: FilterCriteria) -> bool:
    if criteria.protein_min <= 0:
        return True
    return (dish.protein or 0) >= criteria.protein_min


def _within_carbs_limit(dish: Dish, criteria: FilterCriteria) -> bool:
    if dish.carbs is None or criteria.carbs_max is None:
        return True
    return dish.carbs <= criteria.carbs_max


def dish_matches(dish: Dish, criteria: FilterCriteria) -> bool:
    """Return True when one dish satisfies every active criterion."""
    term = criteria.search.strip().lower()
    if term and not _matches_search(dish, term, criteria.search_tags):
        return False
    if criteria.diet_tags and not _intersects(dish.diet_tags, criteria.diet_tags):
        return False
    if criteria.tags and not _intersects(dish.tags, criteria.tags):
        return False
    return (
        _in_price_range(dish, criteria)
        and _in_calorie_range(dish, criteria)
        and _meets_protein_minimum(dish, criteria)
        and _within_carbs_limit(dish, criteria)
    )


def filter_dishes(dishes: Sequence[Dish], criteria: FilterCriteria) -> list[Dish]:
    """Return the ordered subset of dishes matching all active criteria."""
    return [dish for dish in dishes if dish_matches(dish, criteria)]


def default_bounds(dishes: Sequence[Dish]) -> FilterBounds:
    """Compute open range limits from observed maxima, never below the fallbacks."""
    max_price = max([Decimal(str(dish.price)) for dish in dishes] + [FALLBACK_MAX_PRICE])
    max_calories = max([dish.calories or 0 for dish in dishes] + [FALLBACK_MAX_CALORIES])
    max_carbs = max([dish.carbs or 0 for dish in dishes] + [FALLBACK_MAX_CARBS])
    return FilterBounds(max_price=max_price, max_calories=max_calories, max_carbs=max_carbs)


def open_criteria(bounds: FilterBounds) -> FilterCriteria:
    """Build criteria with every filter at its open default for the given bounds."""
    return FilterCriteria(
        price_max=bounds.max_price,
        calorie_max=bounds.max_calories,
        carbs_max=bounds.max_carbs,
    )


def collect_tag_values(dishes: Sequence[Dish], field: str) -> list[str]:
    """Return unique values of a tag field in first-seen order."""
    seen: dict[str, None] = {}
    for dish in dishes:
        for value in _normalized_values(getattr(dish, field, None)):
            if value:
                seen.setdefault(value, None)
    return list(seen)
