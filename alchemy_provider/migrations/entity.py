from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from alchemy_provider.orm.entity import Entity


class Migration(Entity):
    """A migration that ran, and the batch it ran in."""

    __tablename__ = "migrations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    migration: Mapped[str] = mapped_column(String(255))
    batch: Mapped[int] = mapped_column(Integer)
