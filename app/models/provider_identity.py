"""ProviderIdentity SQLAlchemy model."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.user import utcnow

if TYPE_CHECKING:
    from app.models.user import User


class Provider(str, enum.Enum):
    """Identity providers users can log in with."""

    GOOGLE = "google"
    GITHUB = "github"


class ProviderIdentity(Base):
    """Binding of one external account to a local user.

    Rows are written once, on the first login through that provider, and
    never updated.
    """

    __tablename__ = "provider_identities"
    __table_args__ = (UniqueConstraint("provider", "provider_user_id"),)

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    provider: Mapped[Provider] = mapped_column(
        Enum(
            Provider,
            native_enum=False,
            length=50,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        comment="OAuth provider: 'github' or 'google'",
    )
    provider_user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Subject id assigned by the OAuth provider",
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    user: Mapped["User"] = relationship(back_populates="identities", lazy="raise")

    def __repr__(self) -> str:
        return f"<ProviderIdentity {self.provider.value}:{self.provider_user_id}>"
