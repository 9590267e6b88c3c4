"""Filter selection state for a single menu view."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from app.models.dish import Dish
from app.services.dish_filters import (
    FilterBounds,
    FilterCriteria,
    collect_tag_values,
    default_bounds,
    filter_dishes,
    open_criteria,
)


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(str(value) for value in values))


def _toggled(selection: tuple[str, ...], value: str) -> tuple[str, ...]:
    if value in selection:
        return tuple(item for item in selection if item != value)
    return selection + (value,)


class CriteriaStore:
    """Holds the current ``FilterCriteria`` for one dish collection.

    Mutators never validate or clamp: out-of-range values are kept as given.
    The visible dish list is derived again on every read.
    """

    def __init__(self, dishes: Sequence[Dish] = ()) -> None:
        self._dishes: list[Dish] = []
        self._bounds: FilterBounds = FilterBounds()
        self._criteria: FilterCriteria = open_criteria(self._bounds)
        self.load(dishes)

    def load(self, dishes: Sequence[Dish]) -> None:
        """Replace the dish collection and reopen every filter for it."""
        self._dishes = list(dishes)
        self._bounds = default_bounds(self._dishes)
        self._criteria = open_criteria(self._bounds)

    def copy(self) -> "CriteriaStore":
        """Independent store over the same dishes with the same selections."""
        clone = CriteriaStore(self._dishes)
        clone._criteria = self._criteria
        return clone

    @property
    def dishes(self) -> list[Dish]:
        return list(self._dishes)

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def bounds(self) -> FilterBounds:
        return self._bounds

    @property
    def visible_dishes(self) -> list[Dish]:
        return filter_dishes(self._dishes, self._criteria)

    @property
    def available_diet_tags(self) -> list[str]:
        return collect_tag_values(self._dishes, "diet_tags")

    @property
    def available_tags(self) -> list[str]:
        return collect_tag_values(self._dishes, "tags")

    @property
    def has_active_filters(self) -> bool:
        current = self._criteria.model_copy(update={"search_tags": False})
        return current != open_criteria(self._bounds)

    def _update(self, **changes: object) -> None:
        self._criteria = self._criteria.model_copy(update=changes)

    def set_diet_tags(self, tags: Iterable[str]) -> None:
        self._update(diet_tags=_unique(tags))

    def set_tags(self, tags: Iterable[str]) -> None:
        self._update(tags=_unique(tags))

    def set_search_term(self, term: str) -> None:
        self._update(search=term or "")

    def set_search_tags(self, enabled: bool) -> None:
        """Enable matching the search term against dish tags too."""
        self._update(search_tags=bool(enabled))

    def set_price_range(self, minimum: Decimal | int | float | str, maximum: Decimal | int | float | str | None) -> None:
        self._update(
            price_min=Decimal(str(minimum)),
            price_max=None if maximum is None else Decimal(str(maximum)),
        )

    def set_calorie_range(self, minimum: int, maximum: int | None) -> None:
        self._update(calorie_min=int(minimum), calorie_max=None if maximum is None else int(maximum))

    def set_protein_range(self, minimum: int) -> None:
        self._update(protein_min=int(minimum))

    def set_carbs_limit(self, maximum: int | None) -> None:
        self._update(carbs_max=None if maximum is None else int(maximum))

    def toggle_diet_tag(self, tag: str) -> None:
        self._update(diet_tags=_toggled(self._criteria.diet_tags, tag))

    def toggle_tag(self, tag: str) -> None:
        self._update(tags=_toggled(self._criteria.tags, tag))

    def clear(self) -> None:
        """Reset every selection to its open default for the current dishes."""
        self._bounds = default_bounds(self._dishes)
        self._criteria = open_criteria(self._bounds)
