"""Column mixins for entities."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching ``DateTime`` columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SoftDeletes:
    """Mark rows as deleted instead of removing them.

    Removing an entity stamps ``deleted_at``; the ``trashed`` filter hides
    stamped rows from queries until the stamp is in the past.
    """

    deleted_at: Mapped[datetime | None] = mapped_column("deleted_at", DateTime, nullable=True, default=None)

    def is_deleted(self) -> bool:
        return self.deleted_at is not None and self.deleted_at <= utcnow()

    def restore(self) -> None:
        self.deleted_at = None


class Timestamps:
    """``created_at`` / ``updated_at`` columns maintained by the database."""

    created_at: Mapped[datetime | None] = mapped_column("created_at", DateTime, server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(
        "updated_at", DateTime, server_default=func.now(), onupdate=func.now()
    )
