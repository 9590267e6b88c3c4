"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from app.models import dish as _dish  # noqa: E402,F401
from app.models import restaurant as _restaurant  # noqa: E402,F401
from app.models import user as _user  # noqa: E402,F401
