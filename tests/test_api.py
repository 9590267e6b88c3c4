"""JSON API tests."""

from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.db import session as db_session
from app.db.base import Base
from app.main import app


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _use_test_database(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "api.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr("app.main.engine", engine)
    monkeypatch.setattr("app.main.SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "seed_demo", False)


def _auth_headers(client: TestClient, email: str) -> dict[str, str]:
    register_response = client.post("/api/v1/auth/register", json={"email": email, "password": "secret123"})
    assert register_response.status_code == 201

    login_response = client.post("/api/v1/auth/login", json={"email": email, "password": "secret123"})
    assert login_response.status_code == 200
    token = login_response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


def _dish_json(**overrides) -> dict:
    payload = {
        "name": "Salmão Grelhado",
        "description": "Com legumes",
        "price": "42.90",
        "calories": 420,
        "protein": 35,
        "tags": ["Rico em Proteína"],
        "diet_tags": ["sem-gluten"],
    }
    payload.update(overrides)
    return payload


def test_register_login_and_me(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _auth_headers(client, "dona@example.com")
        me_response = client.get("/api/v1/auth/me", headers=headers)
        duplicate = client.post("/api/v1/auth/register", json={"email": "dona@example.com", "password": "secret123"})
        bad_login = client.post("/api/v1/auth/login", json={"email": "dona@example.com", "password": "errada"})

    assert me_response.status_code == 200
    assert me_response.json()["email"] == "dona@example.com"
    assert me_response.json()["restaurant_id"] is None
    assert duplicate.status_code == 400
    assert bad_login.status_code == 401


def test_invalid_token_is_rejected(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch)

    with TestClient(app) as client:
        response = client.get("/api/v1/restaurants/me", headers={"Authorization": "Bearer not-a-token"})
        missing = client.get("/api/v1/restaurants/me")

    assert response.status_code == 401
    assert missing.status_code in {401, 403}


def test_owner_manages_restaurant_and_dishes(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _auth_headers(client, "dona@example.com")
        assert client.get("/api/v1/restaurants/me", headers=headers).status_code == 404

        created = client.post("/api/v1/restaurants/me", json={"name": "Bistrô"}, headers=headers)
        assert created.status_code == 201
        restaurant_id = created.json()["restaurant"]["id"]
        assert created.json()["theme"]["header_variant"] == "logo-name"

        updated = client.put(
            "/api/v1/restaurants/me",
            json={"name": "Bistrô da Praça", "header_style": "banner", "card_size": "large"},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["theme"]["card_grid_class"] == "grid-1"

        colors = client.put(
            "/api/v1/restaurants/me/colors",
            json={"primary_color": "#DC2626", "secondary_color": "#fbbf24"},
            headers=headers,
        )
        assert colors.json()["restaurant"]["primary_color"] == "#dc2626"

        dish = client.post("/api/v1/restaurants/me/dishes", json=_dish_json(), headers=headers)
        assert dish.status_code == 201
        dish_id = dish.json()["id"]
        assert Decimal(str(dish.json()["price"])) == Decimal("42.90")

        invalid = client.post("/api/v1/restaurants/me/dishes", json=_dish_json(price="0"), headers=headers)
        assert invalid.status_code == 422
        oversized = client.post("/api/v1/restaurants/me/dishes", json=_dish_json(calories=10**30), headers=headers)
        assert oversized.status_code == 422

        renamed = client.put(
            f"/api/v1/restaurants/me/dishes/{dish_id}",
            json=_dish_json(name="Salmão ao Molho"),
            headers=headers,
        )
        assert renamed.json()["name"] == "Salmão ao Molho"

        toggled = client.post(f"/api/v1/restaurants/me/dishes/{dish_id}/toggle", headers=headers)
        assert toggled.json()["is_available"] is False

        listing = client.get("/api/v1/restaurants/me/dishes", headers=headers)
        assert [item["id"] for item in listing.json()] == [dish_id]

        public_menu = client.get(f"/api/v1/restaurants/{restaurant_id}/menu")
        assert public_menu.json()["total"] == 0

        me_response = client.get("/api/v1/auth/me", headers=headers)
        assert me_response.json()["restaurant_id"] == restaurant_id

        deleted = client.delete(f"/api/v1/restaurants/me/dishes/{dish_id}", headers=headers)
        assert deleted.status_code == 204
        missing = client.delete(f"/api/v1/restaurants/me/dishes/{dish_id}", headers=headers)
        assert missing.status_code == 404


def test_public_menu_json_filters_and_facets(tmp_path: Path, monkeypatch) -> None:
    _use_test_database(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _auth_headers(client, "dona@example.com")
        restaurant_id = client.post("/api/v1/restaurants/me", headers=headers).json()["restaurant"]["id"]
        client.post("/api/v1/restaurants/me/dishes", json=_dish_json(), headers=headers)
        client.post(
            "/api/v1/restaurants/me/dishes",
            json=_dish_json(
                name="Bowl Vegano",
                price="28.50",
                protein=14,
                tags=["Leve"],
                diet_tags=["vegano", "sem-gluten"],
            ),
            headers=headers,
        )

        everything = client.get(f"/api/v1/restaurants/{restaurant_id}/menu")
        filtered = client.get(
            f"/api/v1/restaurants/{restaurant_id}/menu",
            params={"diet": "sem-gluten", "price_min": "0", "price_max": "30"},
        )
        by_tag_search = client.get(f"/api/v1/restaurants/{restaurant_id}/menu", params={"q": "leve", "search_tags": "1"})
        detail = client.get(f"/api/v1/restaurants/{restaurant_id}")
        unknown = client.get("/api/v1/restaurants/unknown/menu")

    body = everything.json()
    assert body["total"] == 2
    assert body["has_active_filters"] is False
    assert body["available_diet_tags"] == ["vegano", "sem-gluten"]
    assert Decimal(str(body["bounds"]["max_price"])) == Decimal("100")
    assert [dish["name"] for dish in filtered.json()["dishes"]] == ["Bowl Vegano"]
    assert filtered.json()["has_active_filters"] is True
    assert [dish["name"] for dish in by_tag_search.json()["dishes"]] == ["Bowl Vegano"]
    assert detail.json()["theme"]["font_family"] == "Inter, sans-serif"
    assert unknown.status_code == 404
