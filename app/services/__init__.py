"""Service layer: claim normalization, identity reconciliation, profiles."""

from app.services import normalizer, reconciler
from app.services import user as user_service

__all__ = ["normalizer", "reconciler", "user_service"]
