"""Public menu page tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db import session as db_session
from app.db.base import Base
from app.main import app, format_price
from app.models.dish import Dish
from app.models.restaurant import Restaurant


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _use_test_database(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "public_menu.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr("app.main.engine", engine)
    monkeypatch.setattr("app.main.SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "seed_demo", False)
    return testing_session_local


def _create_menu(testing_session_local: sessionmaker, **restaurant_fields) -> tuple[str, dict[str, str]]:
    now = datetime.now(timezone.utc)
    with testing_session_local() as db:
        restaurant = Restaurant(name="Cozinha Teste", **restaurant_fields)
        db.add(restaurant)
        db.flush()
        dishes = [
            Dish(
                restaurant_id=restaurant.id,
                name="Salmão Grelhado",
                description="Com legumes",
                price=Decimal("42.90"),
                protein=35,
                tags=[],
                diet_tags=["sem-gluten"],
                created_at=now + timedelta(seconds=2),
            ),
            Dish(
                restaurant_id=restaurant.id,
                name="Bowl Vegano",
                description="Quinoa",
                price=Decimal("28.50"),
                protein=14,
                tags=["Leve"],
                diet_tags=["vegano", "sem-gluten"],
                created_at=now + timedelta(seconds=1),
            ),
            Dish(
                restaurant_id=restaurant.id,
                name="Prato Escondido",
                description="Fora do cardápio",
                price=Decimal("15.00"),
                tags=[],
                diet_tags=[],
                is_available=False,
                created_at=now,
            ),
        ]
        db.add_all(dishes)
        db.commit()
        return restaurant.id, {dish.name: dish.id for dish in dishes}


def test_public_menu_lists_available_dishes_only(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local)

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}")

    assert response.status_code == 200
    assert "Salmão Grelhado" in response.text
    assert "Bowl Vegano" in response.text
    assert "Prato Escondido" not in response.text
    assert "2 de 2 pratos" in response.text
    assert response.text.index("Salmão Grelhado") < response.text.index("Bowl Vegano")


def test_public_menu_applies_query_filters(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local)

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}?diet=sem-gluten&price_min=0&price_max=30")
        protein_response = client.get(f"/menu/{restaurant_id}?protein_min=30")

    assert "Bowl Vegano" in response.text
    assert "Salmão Grelhado" not in response.text
    assert "1 de 2 pratos" in response.text
    assert "Limpar filtros" in response.text
    assert "Salmão Grelhado" in protein_response.text
    assert "Bowl Vegano" not in protein_response.text


def test_public_menu_shows_empty_state_when_nothing_matches(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local)

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}?q=pizza")

    assert response.status_code == 200
    assert "Nenhum prato encontrado com os filtros selecionados." in response.text


def test_filter_panel_offers_diet_toggle_links(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local)

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}?filters=1")

    assert f"/menu/{restaurant_id}?diet=vegano&amp;filters=1" in response.text
    assert "Sem Glúten" in response.text


def test_unknown_restaurant_renders_not_found_page(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.get("/menu/does-not-exist")

    assert response.status_code == 404
    assert "Restaurante não encontrado" in response.text


def test_database_error_renders_unavailable_page(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local)

    def failing_lookup(db, restaurant_id):
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr("app.main.get_restaurant", failing_lookup)
    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}")

    assert response.status_code == 503
    assert "Erro ao carregar cardápio" in response.text


def test_oversized_query_numbers_keep_menu_open(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local)

    with TestClient(app) as client:
        by_price = client.get(f"/menu/{restaurant_id}?price_max=1e1000000&filters=1")
        by_calories = client.get(f"/menu/{restaurant_id}?cal_max=1e1000000")

    assert by_price.status_code == 200
    assert by_calories.status_code == 200
    assert "Bowl Vegano" in by_price.text


def test_unknown_header_style_renders_logo_name_variant(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local, header_style="unknown-value", card_size="small")

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}")

    assert "header-logo-name" in response.text
    assert "grid-3" in response.text


def test_background_image_renders_overlay(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, _ = _create_menu(testing_session_local, background_image_url="https://img.example/bg.jpg")

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}")

    assert "background-overlay" in response.text


def test_dish_detail_shows_full_information(tmp_path: Path, monkeypatch) -> None:
    testing_session_local = _use_test_database(tmp_path, monkeypatch)
    restaurant_id, dish_ids = _create_menu(testing_session_local)

    with TestClient(app) as client:
        response = client.get(f"/menu/{restaurant_id}/dishes/{dish_ids['Bowl Vegano']}")
        hidden = client.get(f"/menu/{restaurant_id}/dishes/{dish_ids['Prato Escondido']}")

    assert response.status_code == 200
    assert "R$ 28,50" in response.text
    assert "Vegano" in response.text
    assert hidden.status_code == 404


def test_format_price_uses_brazilian_notation() -> None:
    assert format_price(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_price(None) == "R$ 0,00"
