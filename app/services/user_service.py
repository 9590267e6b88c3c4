"""User service operations."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.user import User, normalize_email


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == normalize_email(email)).limit(1))


def get_user_by_id(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def create_user(db: Session, email: str, hashed_password: str) -> User:
    user = User(email=normalize_email(email), password_hash=hashed_password, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
