"""SQLAlchemy models.

All models should be imported here for Alembic to detect them.
"""

from app.core.database import Base
from app.models.provider_identity import Provider, ProviderIdentity
from app.models.user import User

__all__ = ["Base", "Provider", "ProviderIdentity", "User"]
