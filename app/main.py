"""FastAPI entrypoint for the multi-tenant digital menu."""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from urllib.parse import parse_qs, quote_plus

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware

from app.api.v1.api import api_router
from app.auth import OWNER_LANDING, get_current_user, require_login, start_session
from app.core.config import settings
from app.db.base import Base
from app.db.migrations import ensure_sqlite_schema
from app.db.seed import ensure_demo_restaurant
from app.db.session import SessionLocal, engine
from app.models import Dish, Restaurant, User
from app.services.account_service import AccountError, authenticate_user, register_account
from app.services.dish_service import (
    DishValidationError,
    create_dish,
    delete_dish,
    get_dish,
    list_available_dishes,
    list_dishes,
    parse_dish_form,
    toggle_dish_availability,
    update_dish,
)
from app.services.menu_view import MenuQuery, build_store, toggle_url
from app.services.restaurant_service import (
    RestaurantValidationError,
    create_restaurant_for_owner,
    get_owned_restaurant,
    get_restaurant,
    is_owner,
    menu_url,
    parse_color_form,
    parse_settings_form,
    update_restaurant_colors,
    update_restaurant_settings,
)
from app.services.theme_service import (
    CARD_SIZE_LABELS,
    HEADER_STYLE_LABELS,
    PRESET_THEMES,
    diet_tag_display,
    resolve_theme,
)

BASE_DIR = Path(__file__).resolve().parent
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    same_site="lax",
    https_only=False,
    max_age=60 * 60 * 24 * 7,
)
app.include_router(api_router, prefix="/api/v1")
app.mount("/static", StaticFiles(directory=BASE_DIR / "static"), name="static")
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
ADMIN_TABS = ("dishes", "settings", "appearance")


def format_price(value: Decimal | int | float | None) -> str:
    """Format a price as Brazilian reais, e.g. ``R$ 42,90``."""
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"))
    return "R$ " + f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")


templates.env.filters["brl"] = format_price
templates.env.globals["diet_tag_display"] = diet_tag_display


def inject_globals(request: Request) -> dict[str, object]:
    """Inject common session-derived values for Jinja templates."""
    return {
        "session": request.session,
        "current_user": get_current_user(request),
        "app_name": settings.app_name,
    }


def render_template(request: Request, name: str, context: dict | None = None, status_code: int = 200):
    """Render a template with required request object and shared global context."""
    payload = {"request": request, **inject_globals(request)}
    if context:
        payload.update(context)
    return templates.TemplateResponse(request, name, payload, status_code=status_code)


@app.on_event("startup")
def startup() -> None:
    secret_from_env = settings.session_secret != settings.session_secret_fallback
    source = "env" if secret_from_env else "fallback"
    logger.info("Session secret source: %s", source)
    if not secret_from_env:
        logger.warning("SESSION_SECRET not set; using development fallback secret.")
    Base.metadata.create_all(bind=engine)
    added_columns = ensure_sqlite_schema(engine)
    if added_columns:
        logger.info("[BOOTSTRAP] Added legacy columns: %s", ", ".join(added_columns))
    with SessionLocal() as session:
        try:
            ensure_demo_restaurant(session)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("[BOOTSTRAP] Demo seed failed; continuing startup.")


async def _form_data(request: Request) -> dict[str, str]:
    body = (await request.body()).decode()
    parsed = parse_qs(body, keep_blank_values=True)
    return {key: values[-1] if values else "" for key, values in parsed.items()}


def _admin_redirect(message: str | None = None, tab: str = "dishes") -> RedirectResponse:
    url = f"/admin?tab={tab}"
    if message:
        url += f"&message={quote_plus(message)}"
    return RedirectResponse(url=url, status_code=303)


def _dish_form_values(dish: Dish | None) -> dict[str, object]:
    if dish is None:
        return {
            "name": "",
            "description": "",
            "full_description": "",
            "price": "",
            "image_url": "",
            "calories": "",
            "protein": "",
            "carbs": "",
            "fat": "",
            "tags": "",
            "diet_tags": "",
            "is_available": True,
        }
    return {
        "name": dish.name,
        "description": dish.description or "",
        "full_description": dish.full_description or "",
        "price": f"{dish.price:.2f}",
        "image_url": dish.image_url or "",
        "calories": "" if dish.calories is None else dish.calories,
        "protein": "" if dish.protein is None else dish.protein,
        "carbs": "" if dish.carbs is None else dish.carbs,
        "fat": "" if dish.fat is None else dish.fat,
        "tags": ", ".join(dish.tags or []),
        "diet_tags": ", ".join(dish.diet_tags or []),
        "is_available": dish.is_available,
    }


def _submitted_form_values(form: dict[str, str]) -> dict[str, object]:
    values = {key: form.get(key, "") for key in _dish_form_values(None)}
    values["is_available"] = form.get("is_available") in {"true", "on", "1"}
    return values


def _owner_restaurant(current: dict) -> Restaurant | None:
    with SessionLocal() as db:
        return get_owned_restaurant(db, str(current["user_id"]))


@app.get("/health", include_in_schema=False)
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
def root(request: Request):
    return render_template(request, "index.html", {"demo_restaurant_id": settings.demo_restaurant_id})


@app.get("/auth", response_class=HTMLResponse)
def auth_page(request: Request, mode: str = "login", error: str | None = None, email: str = ""):
    if get_current_user(request):
        return RedirectResponse(url=OWNER_LANDING, status_code=303)
    mode = "register" if mode == "register" else "login"
    return render_template(request, "auth.html", {"mode": mode, "error": error, "email": email})


@app.post("/auth/login", response_class=RedirectResponse)
async def login_submit(request: Request):
    form = await _form_data(request)
    email = form.get("email", "").strip()
    password = form.get("password", "")
    try:
        with SessionLocal() as db:
            user = authenticate_user(db, email, password)
    except SQLAlchemyError:
        logger.exception("[AUTH] Login failed for email=%s", email)
        return auth_page(request, mode="login", error="Erro ao entrar. Tente novamente.", email=email)
    if user is None:
        return auth_page(request, mode="login", error="Email ou senha inválidos.", email=email)
    start_session(request, user)
    logger.info("[AUTH] Login user_id=%s", user.id)
    return RedirectResponse(url=OWNER_LANDING, status_code=303)


@app.post("/auth/register", response_class=RedirectResponse)
async def register_submit(request: Request):
    form = await _form_data(request)
    email = form.get("email", "").strip()
    password = form.get("password", "")
    confirm_password = form.get("confirm_password", password)
    if password != confirm_password:
        return auth_page(request, mode="register", error="As senhas não coincidem.", email=email)
    try:
        with SessionLocal() as db:
            user = register_account(db, email, password)
    except AccountError as exc:
        return auth_page(request, mode="register", error=str(exc), email=email)
    except SQLAlchemyError:
        logger.exception("[AUTH] Registration failed for email=%s", email)
        return auth_page(request, mode="register", error="Erro ao criar conta. Tente novamente.", email=email)
    start_session(request, user)
    return RedirectResponse(url=OWNER_LANDING, status_code=303)


@app.post("/logout", response_class=RedirectResponse)
def logout(request: Request):
    request.session.clear()
    return RedirectResponse(url="/", status_code=303)


@app.get("/logout", response_class=RedirectResponse)
def logout_get(request: Request):
    return logout(request)


@app.get("/admin", response_class=HTMLResponse)
def admin_dashboard(request: Request, tab: str = "dishes"):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    message = request.query_params.get("message")
    tab = tab if tab in ADMIN_TABS else "dishes"
    try:
        with SessionLocal() as db:
            restaurant = get_owned_restaurant(db, str(current["user_id"]))
            dishes = list_dishes(db, restaurant.id) if restaurant is not None else []
    except SQLAlchemyError:
        logger.exception("[ADMIN] Dashboard load failed for user_id=%s", current["user_id"])
        return render_template(
            request,
            "admin_setup.html",
            {"message": "Erro ao carregar o painel. Tente novamente."},
            status_code=503,
        )
    if restaurant is None:
        return render_template(request, "admin_setup.html", {"message": message})

    return render_template(
        request,
        "admin.html",
        {
            "tab": tab,
            "message": message,
            "restaurant": restaurant,
            "dishes": dishes,
            "theme": resolve_theme(restaurant),
            "header_styles": HEADER_STYLE_LABELS,
            "card_sizes": CARD_SIZE_LABELS,
            "presets": PRESET_THEMES,
            "menu_url": menu_url(settings.public_base_url, restaurant.id),
        },
    )


@app.post("/admin/restaurant", response_class=RedirectResponse)
def admin_create_restaurant(request: Request):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    try:
        with SessionLocal() as db:
            user = db.get(User, str(current["user_id"]))
            if user is None:
                request.session.clear()
                return RedirectResponse(url="/auth", status_code=303)
            create_restaurant_for_owner(db, user)
    except SQLAlchemyError:
        logger.exception("[ADMIN] Restaurant creation failed for user_id=%s", current["user_id"])
        return _admin_redirect("Erro ao criar restaurante")
    return _admin_redirect("Restaurante criado com sucesso!")


@app.get("/admin/dishes/new", response_class=HTMLResponse)
def admin_dish_new(request: Request):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    if _owner_restaurant(current) is None:
        return _admin_redirect()
    return render_template(request, "dish_form.html", {"dish_id": None, "error": None, "form": _dish_form_values(None)})


@app.post("/admin/dishes", response_class=RedirectResponse)
async def admin_dish_create(request: Request):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    form = await _form_data(request)
    try:
        payload = parse_dish_form(form)
    except DishValidationError as exc:
        return render_template(
            request,
            "dish_form.html",
            {"dish_id": None, "error": str(exc), "form": _submitted_form_values(form)},
        )

    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        if restaurant is None:
            return _admin_redirect()
        try:
            create_dish(db, restaurant.id, payload)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("[MENU] Dish creation failed for restaurant_id=%s", restaurant.id)
            return _admin_redirect("Erro ao salvar prato")
    return _admin_redirect("Prato criado com sucesso!")


@app.get("/admin/dishes/{dish_id}/edit", response_class=HTMLResponse)
def admin_dish_edit(request: Request, dish_id: str):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        dish = get_dish(db, restaurant.id, dish_id) if restaurant is not None else None
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    return render_template(request, "dish_form.html", {"dish_id": dish.id, "error": None, "form": _dish_form_values(dish)})


@app.post("/admin/dishes/{dish_id}/edit", response_class=RedirectResponse)
async def admin_dish_update(request: Request, dish_id: str):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    form = await _form_data(request)
    try:
        payload = parse_dish_form(form)
    except DishValidationError as exc:
        return render_template(
            request,
            "dish_form.html",
            {"dish_id": dish_id, "error": str(exc), "form": _submitted_form_values(form)},
        )

    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        if restaurant is None:
            raise HTTPException(status_code=404, detail="Dish not found")
        try:
            dish = update_dish(db, restaurant.id, dish_id, payload)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("[MENU] Dish update failed dish_id=%s", dish_id)
            return _admin_redirect("Erro ao salvar prato")
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    return _admin_redirect("Prato atualizado com sucesso!")


@app.post("/admin/dishes/{dish_id}/toggle", response_class=RedirectResponse)
def admin_dish_toggle(request: Request, dish_id: str):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        if restaurant is None:
            raise HTTPException(status_code=404, detail="Dish not found")
        try:
            dish = toggle_dish_availability(db, restaurant.id, dish_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("[MENU] Availability toggle failed dish_id=%s", dish_id)
            return _admin_redirect("Erro ao atualizar disponibilidade")
    if dish is None:
        raise HTTPException(status_code=404, detail="Dish not found")
    return _admin_redirect()


@app.post("/admin/dishes/{dish_id}/delete", response_class=RedirectResponse)
def admin_dish_delete(request: Request, dish_id: str):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        if restaurant is None:
            raise HTTPException(status_code=404, detail="Dish not found")
        try:
            deleted = delete_dish(db, restaurant.id, dish_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("[MENU] Dish delete failed dish_id=%s", dish_id)
            return _admin_redirect("Erro ao excluir prato")
    if not deleted:
        raise HTTPException(status_code=404, detail="Dish not found")
    return _admin_redirect("Prato excluído com sucesso!")


@app.post("/admin/settings", response_class=RedirectResponse)
async def admin_settings_save(request: Request):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    form = await _form_data(request)
    try:
        payload = parse_settings_form(form)
    except RestaurantValidationError as exc:
        return _admin_redirect(str(exc), tab="settings")

    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        if restaurant is None:
            return _admin_redirect()
        try:
            update_restaurant_settings(db, restaurant, payload)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("[ADMIN] Settings save failed restaurant_id=%s", restaurant.id)
            return _admin_redirect("Erro ao salvar configurações", tab="settings")
    return _admin_redirect("Configurações salvas com sucesso!", tab="settings")


@app.post("/admin/appearance", response_class=RedirectResponse)
async def admin_appearance_save(request: Request):
    current = require_login(request)
    if isinstance(current, RedirectResponse):
        return current
    form = await _form_data(request)
    try:
        payload = parse_color_form(form)
    except RestaurantValidationError as exc:
        return _admin_redirect(str(exc), tab="appearance")

    with SessionLocal() as db:
        restaurant = get_owned_restaurant(db, str(current["user_id"]))
        if restaurant is None:
            return _admin_redirect()
        try:
            update_restaurant_colors(db, restaurant, payload)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("[ADMIN] Color save failed restaurant_id=%s", restaurant.id)
            return _admin_redirect("Erro ao salvar cores", tab="appearance")
    return _admin_redirect("Cores personalizadas salvas!", tab="appearance")


def _restaurant_not_found(request: Request, message: str | None = None, status_code: int = 404):
    return render_template(request, "restaurant_not_found.html", {"error_message": message}, status_code=status_code)


@app.get("/menu/{restaurant_id}", response_class=HTMLResponse)
def public_menu(request: Request, restaurant_id: str):
    query = MenuQuery.from_multi_dict(parse_qs(request.url.query, keep_blank_values=True))
    current = get_current_user(request)
    try:
        with SessionLocal() as db:
            restaurant = get_restaurant(db, restaurant_id)
            if restaurant is None:
                return _restaurant_not_found(request)
            dishes = list_available_dishes(db, restaurant.id)
            owner = is_owner(db, current["user_id"] if current else None, restaurant.id)
    except SQLAlchemyError:
        logger.exception("[MENU] Menu load failed restaurant_id=%s", restaurant_id)
        return _restaurant_not_found(request, message="Erro ao carregar cardápio", status_code=503)

    store = build_store(dishes, query)
    base_path = f"/menu/{restaurant.id}"
    return render_template(
        request,
        "public_menu.html",
        {
            "restaurant": restaurant,
            "theme": resolve_theme(restaurant),
            "store": store,
            "criteria": store.criteria,
            "visible_dishes": store.visible_dishes,
            "total_dishes": len(dishes),
            "show_filters": request.query_params.get("filters") == "1" or store.has_active_filters,
            "diet_tag_links": [
                (tag, tag in store.criteria.diet_tags, toggle_url(base_path, store, "diet", tag))
                for tag in store.available_diet_tags
            ],
            "tag_links": [
                (tag, tag in store.criteria.tags, toggle_url(base_path, store, "tag", tag))
                for tag in store.available_tags
            ],
            "base_path": base_path,
            "is_owner": owner,
        },
    )


@app.get("/menu/{restaurant_id}/dishes/{dish_id}", response_class=HTMLResponse)
def public_dish_detail(request: Request, restaurant_id: str, dish_id: str):
    try:
        with SessionLocal() as db:
            restaurant = get_restaurant(db, restaurant_id)
            if restaurant is None:
                return _restaurant_not_found(request)
            dish = get_dish(db, restaurant.id, dish_id)
    except SQLAlchemyError:
        logger.exception("[MENU] Dish load failed dish_id=%s", dish_id)
        return _restaurant_not_found(request, message="Erro ao carregar prato", status_code=503)
    if dish is None or not dish.is_available:
        raise HTTPException(status_code=404, detail="Dish not found")
    return render_template(
        request,
        "dish_detail.html",
        {"restaurant": restaurant, "dish": dish, "theme": resolve_theme(restaurant)},
    )
