"""Pydantic base schema utilities for Gradii models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    """
    Base Pydantic model for all domain schemas.

    Configures common Pydantic behaviors:
    - ``populate_by_name=True``: Allow initialization by alias or field name.
    - ``extra="forbid"``: Prevent unknown fields from slipping into the model, ensuring strict validation.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
    )


class CamelSchema(BaseModel):
    """Base for documents authored outside this service (stored question sets).

    - Accepts camelCase or snake_case keys
    - Ignores unknown keys, since question generators attach extra metadata
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        alias_generator=_to_camel,  # snake_case -> camelCase aliases
    )
