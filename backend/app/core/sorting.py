"""Shared sorting utilities for repository queries."""

from __future__ import annotations

import re

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from app.core.database import Base

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """Convert a camelCase API field name (``updatedAt``) to its column name."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    sort_by: str | None,
    sort_order: str | None = None,
    default_field: str = "updated_at",
    default_direction: str = "desc",
) -> Query:  # type: ignore[type-arg]
    """Apply ordering to a SQLAlchemy query.

    Args:
        query: The SQLAlchemy query to sort.
        model: The SQLAlchemy model class.
        sort_by: Field to sort by, in camelCase or snake_case. Unknown fields
            fall back to default_field and default_direction.
        sort_order: "asc" or "desc". When sort_by is given and sort_order is
            missing or invalid, ascending order is used.
        default_field: Default column to sort by.
        default_direction: Default sort direction ("asc" or "desc").

    Returns:
        The query with ordering applied.
    """
    field = default_field
    direction = default_direction

    if sort_by:
        candidate_field = to_snake_case(sort_by)
        column = getattr(model, candidate_field, None)
        # Only mapped columns, not arbitrary attributes
        if column is not None and hasattr(column, "property"):
            field = candidate_field
            direction = "desc" if sort_order == "desc" else "asc"

    column = getattr(model, field)
    order_func = asc if direction == "asc" else desc
    return query.order_by(order_func(column))
