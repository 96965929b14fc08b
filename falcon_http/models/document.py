"""
Store document model.

The whole store (projects and environments) is persisted as a single
document row, replaced on every write.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


DOCUMENT_ID = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoreDocument(Base):
    """
    SQLAlchemy model for the store snapshot.

    Attributes:
        id: Always DOCUMENT_ID, there is one document per database
        projects: Serialized projects, nested requests included
        envs: Serialized environments
        updated_at: Timestamp of the last write
    """
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(primary_key=True)
    projects: Mapped[list] = mapped_column(JSON, default=list)
    envs: Mapped[list] = mapped_column(JSON, default=list)
    updated_at: Mapped[datetime] = mapped_column(default=_utcnow, onupdate=_utcnow)

    def to_dict(self) -> dict:
        return {"projects": self.projects or [], "envs": self.envs or []}
