"""Restaurant ownership and settings tests."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.models.restaurant import Restaurant, RestaurantOwner
from app.models.user import User
from app.services import restaurant_service
from app.services.restaurant_service import (
    RestaurantValidationError,
    create_restaurant_for_owner,
    get_owned_restaurant,
    is_owner,
    menu_url,
    parse_color_form,
    parse_settings_form,
    update_restaurant_settings,
)
from app.services.theme_service import CardSize, HeaderStyle


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def test_create_restaurant_links_owner_once(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "owners.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    with testing_session_local() as db:
        owner = User(email="dona@example.com", password_hash="hash")
        stranger = User(email="outra@example.com", password_hash="hash")
        db.add_all([owner, stranger])
        db.commit()

        restaurant = create_restaurant_for_owner(db, owner)
        again = create_restaurant_for_owner(db, owner, name="Segundo")

        assert again.id == restaurant.id
        assert restaurant.name == "Meu Restaurante"
        assert get_owned_restaurant(db, owner.id).id == restaurant.id
        assert get_owned_restaurant(db, stranger.id) is None
        assert is_owner(db, owner.id, restaurant.id)
        assert not is_owner(db, stranger.id, restaurant.id)
        assert not is_owner(db, None, restaurant.id)


def test_owner_cannot_hold_two_ownership_rows(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "single_owner.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    with testing_session_local() as db:
        owner = User(email="dona@example.com", password_hash="hash")
        db.add(owner)
        db.commit()
        create_restaurant_for_owner(db, owner)
        other = Restaurant(name="Segundo")
        db.add(other)
        db.flush()
        db.add(RestaurantOwner(user_id=owner.id, restaurant_id=other.id))

        with pytest.raises(IntegrityError):
            db.commit()


def test_concurrent_create_returns_the_committed_restaurant(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "double_submit.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    with testing_session_local() as db:
        owner = User(email="dona@example.com", password_hash="hash")
        db.add(owner)
        db.commit()
        first = create_restaurant_for_owner(db, owner)

        real_lookup = restaurant_service.get_owned_restaurant
        calls: list[str] = []

        def lookup_missing_first_time(session, user_id):
            calls.append(user_id)
            return None if len(calls) == 1 else real_lookup(session, user_id)

        monkeypatch.setattr(restaurant_service, "get_owned_restaurant", lookup_missing_first_time)
        second = create_restaurant_for_owner(db, owner, name="Segundo")

        assert second.id == first.id
        assert db.scalar(select(func.count()).select_from(Restaurant)) == 1


def test_settings_form_is_validated_and_saved(tmp_path: Path) -> None:
    engine = _build_test_engine(tmp_path / "settings.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    payload = parse_settings_form(
        {
            "name": " Cozinha Nova ",
            "description": "",
            "header_style": "banner",
            "card_size": "large",
            "background_color": "#FAFAFA",
            "font_family": "",
        }
    )
    assert payload.name == "Cozinha Nova"
    assert payload.description is None
    assert payload.header_style == HeaderStyle.BANNER
    assert payload.card_size == CardSize.LARGE
    assert payload.font_family == "Inter"

    with testing_session_local() as db:
        owner = User(email="dono@example.com", password_hash="hash")
        db.add(owner)
        db.commit()
        restaurant = create_restaurant_for_owner(db, owner)
        saved = update_restaurant_settings(db, restaurant, payload)

        assert saved.header_style == "banner"
        assert saved.card_size == "large"
        assert saved.background_color == "#FAFAFA"


@pytest.mark.parametrize(
    ("form", "message"),
    [
        ({"name": " "}, "O nome do restaurante é obrigatório."),
        ({"name": "Ok", "background_color": "azul"}, "Cor inválida, use o formato #rrggbb"),
    ],
)
def test_settings_form_rejects_invalid_input(form: dict[str, str], message: str) -> None:
    with pytest.raises(RestaurantValidationError) as exc_info:
        parse_settings_form(form)

    assert str(exc_info.value) == message


def test_unknown_header_style_in_form_is_rejected() -> None:
    with pytest.raises(RestaurantValidationError):
        parse_settings_form({"name": "Ok", "header_style": "diagonal"})


def test_color_form_accepts_preset_or_explicit_colors() -> None:
    preset = parse_color_form({"preset": "Azul Oceano"})
    explicit = parse_color_form({"primary_color": "#ABCDEF", "secondary_color": "#123456"})

    assert (preset.primary_color, preset.secondary_color) == ("#0ea5e9", "#8b5cf6")
    assert explicit.primary_color == "#abcdef"


def test_color_form_rejects_unknown_preset_and_bad_hex() -> None:
    with pytest.raises(RestaurantValidationError, match="Tema desconhecido."):
        parse_color_form({"preset": "Neon"})
    with pytest.raises(RestaurantValidationError, match="Cor inválida"):
        parse_color_form({"primary_color": "red", "secondary_color": "#123456"})


def test_menu_url_joins_base_and_id() -> None:
    assert menu_url("https://cardapio.example/", "abc") == "https://cardapio.example/menu/abc"
