"""Session-based authentication helpers for server-rendered routes."""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse

from app.models.user import User

LOGIN_PATH = "/auth"
OWNER_LANDING = "/admin"

SessionUser = dict[str, Any]


def get_current_user(request: Request) -> SessionUser | None:
    """Return current authenticated user snapshot from session."""
    user_id = request.session.get("user_id")
    email = request.session.get("email")
    if user_id and email:
        return {"user_id": user_id, "email": email}
    return None


def require_login(request: Request) -> SessionUser | RedirectResponse:
    """Require an authenticated session for page access."""
    current = get_current_user(request)
    if current is None:
        return RedirectResponse(url=LOGIN_PATH, status_code=303)
    return current


def start_session(request: Request, user: User) -> None:
    """Replace any previous session with the given user."""
    request.session.clear()
    request.session["user_id"] = user.id
    request.session["email"] = user.email
