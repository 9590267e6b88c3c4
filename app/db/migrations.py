"""Lightweight schema migrations for SQLite databases."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
# Added to `restaurants` when an existing SQLite file lacks them.
# Layout columns that older SQLite files created before these fields may lack.
RESTAURANT_LAYOUT_COLUMNS: dict[str, str] = {
    "primary_color": "VARCHAR(7) NULL DEFAULT '#3b82f6'",
    "secondary_color": "VARCHAR(7) NULL DEFAULT '#8b5cf6'",
    "font_family": "VARCHAR(100) NULL DEFAULT 'Inter'",
    "header_style": "VARCHAR(32) NULL DEFAULT 'logo-name'",
    "background_color": "VARCHAR(7) NULL",
    "background_image_url": "VARCHAR(500) NULL",
    "card_background_color": "VARCHAR(7) NULL",
    "card_size": "VARCHAR(16) NULL DEFAULT 'medium'",
}

DISH_EXTENDED_COLUMNS: dict[str, str] = {
    "full_description": "TEXT NULL",
    "image_url": "VARCHAR(500) NULL",
    "calories": "INTEGER NULL",
    "protein": "INTEGER NULL",
    "carbs": "INTEGER NULL",
    "fat": "INTEGER NULL",
    "tags": "JSON NOT NULL DEFAULT '[]'",
    "diet_tags": "JSON NOT NULL DEFAULT '[]'",
    "is_available": "BOOLEAN NOT NULL DEFAULT 1",
}


def _sqlite_column_names(connection: Connection, table_name: str) -> set[str]:
    """Return column names for a SQLite table using PRAGMA table_info."""
    rows = connection.execute(text(f"PRAGMA table_info({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _sqlite_index_names(connection: Connection, table_name: str) -> set[str]:
    """Return index names for a SQLite table using PRAGMA index_list."""
    rows = connection.execute(text(f"PRAGMA index_list({table_name});")).mappings().all()
    return {str(row["name"]) for row in rows}


def _add_missing_columns(connection: Connection, table_name: str, columns: dict[str, str]) -> list[str]:
    existing = _sqlite_column_names(connection, table_name)
    added: list[str] = []
    for column_name, ddl in columns.items():
        if column_name in existing:
            continue
        connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
        added.append(column_name)
    return added


def ensure_sqlite_schema(engine: Engine) -> list[str]:
    """Apply lightweight schema updates for legacy SQLite databases.

    Returns the ``table.column`` names that were added.
    """
    if engine.dialect.name != "sqlite":
        return []

    added: list[str] = []
    with engine.begin() as connection:
        table_rows = connection.execute(text("SELECT name FROM sqlite_master WHERE type='table';")).all()
        table_names: set[str] = {str(row[0]) for row in table_rows}

        if "restaurants" in table_names:
            added.extend(f"restaurants.{name}" for name in _add_missing_columns(connection, "restaurants", RESTAURANT_LAYOUT_COLUMNS))

        if "dishes" in table_names:
            added.extend(f"dishes.{name}" for name in _add_missing_columns(connection, "dishes", DISH_EXTENDED_COLUMNS))
            if "ix_dishes_restaurant_id" not in _sqlite_index_names(connection, "dishes"):
                connection.execute(text("CREATE INDEX ix_dishes_restaurant_id ON dishes (restaurant_id)"))

    return added
