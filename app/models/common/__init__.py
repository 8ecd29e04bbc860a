"""Common models - base entity class."""

from app.models.common.base import BaseEntity

__all__ = [
    "BaseEntity",
]
