"""Restaurant-related ORM models."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

DEFAULT_PRIMARY_COLOR = "#3b82f6"
DEFAULT_SECONDARY_COLOR = "#8b5cf6"
DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_HEADER_STYLE = "logo-name"
DEFAULT_CARD_SIZE = "medium"


class Restaurant(Base):
    """Tenant configuration record: branding and menu layout."""

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    primary_color: Mapped[str | None] = mapped_column(String(7), nullable=True, default=DEFAULT_PRIMARY_COLOR)
    secondary_color: Mapped[str | None] = mapped_column(String(7), nullable=True, default=DEFAULT_SECONDARY_COLOR)
    font_family: Mapped[str | None] = mapped_column(String(100), nullable=True, default=DEFAULT_FONT_FAMILY)
    header_style: Mapped[str | None] = mapped_column(String(32), nullable=True, default=DEFAULT_HEADER_STYLE)
    background_color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    background_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    card_background_color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    card_size: Mapped[str | None] = mapped_column(String(16), nullable=True, default=DEFAULT_CARD_SIZE)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    dishes: Mapped[list["Dish"]] = relationship(back_populates="restaurant", cascade="all, delete-orphan")
    owners: Mapped[list["RestaurantOwner"]] = relationship(back_populates="restaurant")


class RestaurantOwner(Base):
    """Ownership grant linking a user account to a restaurant."""

    __tablename__ = "restaurant_owners"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True, unique=True)
    restaurant_id: Mapped[str] = mapped_column(ForeignKey("restaurants.id"), nullable=False, index=True)
    role: Mapped[str | None] = mapped_column(String(32), nullable=True, default="owner")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    restaurant: Mapped[Restaurant] = relationship(back_populates="owners")
    user: Mapped["User"] = relationship(back_populates="ownerships")
