"""Core models and schemas shared across Gradii."""

from __future__ import annotations

from .base import BaseSchema, CamelSchema

__all__ = ["BaseSchema", "CamelSchema"]
