"""Named counter rows backing sequence identifiers."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from neobarber.db.base import Base


class SequenceCounter(Base):
    """One row per identifier namespace.

    Only ever mutated through an atomic increment-and-fetch.
    """

    __tablename__ = "sequence_counters"

    name: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )
    value: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SequenceCounter {self.name}={self.value}>"
