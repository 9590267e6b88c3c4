"""Translate menu query strings into filter state and back."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode

from app.models.dish import Dish
from app.services.criteria_store import CriteriaStore
from app.services.dish_filters import FilterCriteria

MAX_QUERY_EXPONENT = 9


class MenuQuery:
    """Raw filter selections read from a request query string."""

    def __init__(
        self,
        search: str = "",
        diet_tags: Sequence[str] = (),
        tags: Sequence[str] = (),
        price_min: str | None = None,
        price_max: str | None = None,
        calorie_min: str | None = None,
        calorie_max: str | None = None,
        protein_min: str | None = None,
        carbs_max: str | None = None,
        search_tags: bool = False,
    ) -> None:
        self.search = search
        self.diet_tags = list(diet_tags)
        self.tags = list(tags)
        self.price_min = price_min
        self.price_max = price_max
        self.calorie_min = calorie_min
        self.calorie_max = calorie_max
        self.protein_min = protein_min
        self.carbs_max = carbs_max
        self.search_tags = search_tags

    @classmethod
    def from_multi_dict(cls, params: Mapping[str, Sequence[str]]) -> "MenuQuery":
        """Build from a ``{key: [values]}`` mapping such as ``parse_qs`` output."""

        def first(key: str) -> str | None:
            values = params.get(key) or []
            return values[-1] if values else None

        return cls(
            search=first("q") or "",
            diet_tags=list(params.get("diet") or []),
            tags=list(params.get("tag") or []),
            price_min=first("price_min"),
            price_max=first("price_max"),
            calorie_min=first("cal_min"),
            calorie_max=first("cal_max"),
            protein_min=first("protein_min"),
            carbs_max=first("carbs_max"),
            search_tags=(first("search_tags") or "") in {"1", "true", "on"},
        )


def _decimal_or_none(raw: str | None) -> Decimal | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = Decimal(raw.strip().replace(",", "."))
    except InvalidOperation:
        return None
    if not value.is_finite() or abs(value.adjusted()) > MAX_QUERY_EXPONENT:
        return None
    return value


def _int_or_none(raw: str | None) -> int | None:
    value = _decimal_or_none(raw)
    return None if value is None else int(value)


def build_store(dishes: Sequence[Dish], query: MenuQuery) -> CriteriaStore:
    """Load dishes into a store and apply the query selections on top of open defaults.

    Unparseable or out-of-scale numbers are ignored and the matching bound
    stays open.
    """
    store = CriteriaStore(dishes)
    bounds = store.bounds
    store.set_search_term(query.search)
    store.set_search_tags(query.search_tags)
    store.set_diet_tags(tag for tag in query.diet_tags if tag)
    store.set_tags(tag for tag in query.tags if tag)

    price_min = _decimal_or_none(query.price_min)
    price_max = _decimal_or_none(query.price_max)
    store.set_price_range(price_min if price_min is not None else 0, price_max if price_max is not None else bounds.max_price)

    calorie_min = _int_or_none(query.calorie_min)
    calorie_max = _int_or_none(query.calorie_max)
    store.set_calorie_range(calorie_min or 0, calorie_max if calorie_max is not None else bounds.max_calories)

    protein_min = _int_or_none(query.protein_min)
    store.set_protein_range(protein_min or 0)

    carbs_max = _int_or_none(query.carbs_max)
    store.set_carbs_limit(carbs_max if carbs_max is not None else bounds.max_carbs)
    return store


def _number_text(value: Decimal | int) -> str:
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)


def criteria_query_pairs(store: CriteriaStore) -> list[tuple[str, str]]:
    """Encode non-default selections as query pairs."""
    criteria: FilterCriteria = store.criteria
    bounds = store.bounds
    pairs: list[tuple[str, str]] = []
    if criteria.search:
        pairs.append(("q", criteria.search))
    if criteria.search_tags:
        pairs.append(("search_tags", "1"))
    pairs.extend(("diet", tag) for tag in criteria.diet_tags)
    pairs.extend(("tag", tag) for tag in criteria.tags)
    if criteria.price_min != 0:
        pairs.append(("price_min", _number_text(criteria.price_min)))
    if criteria.price_max is not None and criteria.price_max != bounds.max_price:
        pairs.append(("price_max", _number_text(criteria.price_max)))
    if criteria.calorie_min != 0:
        pairs.append(("cal_min", str(criteria.calorie_min)))
    if criteria.calorie_max is not None and criteria.calorie_max != bounds.max_calories:
        pairs.append(("cal_max", str(criteria.calorie_max)))
    if criteria.protein_min:
        pairs.append(("protein_min", str(criteria.protein_min)))
    if criteria.carbs_max is not None and criteria.carbs_max != bounds.max_carbs:
        pairs.append(("carbs_max", str(criteria.carbs_max)))
    return pairs


def toggle_url(base_path: str, store: CriteriaStore, field: str, value: str, show_filters: bool = True) -> str:
    """URL of the same menu view with one diet tag or tag toggled."""
    snapshot = store.copy()
    if field == "diet":
        snapshot.toggle_diet_tag(value)
    else:
        snapshot.toggle_tag(value)
    pairs = criteria_query_pairs(snapshot)
    if show_filters:
        pairs.append(("filters", "1"))
    return f"{base_path}?{urlencode(pairs)}" if pairs else base_path
