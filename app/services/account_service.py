"""Account registration and login helpers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import get_password_hash, verify_password
from app.models.user import User, normalize_email
from app.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AccountError(ValueError):
    """Raised when registration input is rejected."""


def register_account(db: Session, email: str, password: str) -> User:
    """Create an owner account; raises ``AccountError`` on invalid or duplicate input."""
    clean_email = normalize_email(email)
    if "@" not in clean_email or clean_email.startswith("@") or clean_email.endswith("@"):
        raise AccountError("Informe um email válido.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AccountError(f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres.")
    if get_user_by_email(db, clean_email) is not None:
        raise AccountError("Este email já está cadastrado.")
    try:
        hashed_password = get_password_hash(password)
    except ValueError as exc:
        raise AccountError(str(exc)) from exc
    try:
        user = create_user(db, email=clean_email, hashed_password=hashed_password)
    except IntegrityError as exc:
        db.rollback()
        raise AccountError("Este email já está cadastrado.") from exc
    logger.info("[AUTH] Account registered user_id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user
