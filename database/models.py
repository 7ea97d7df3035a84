"""
Database models
"""
import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Enum, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class TicketStatus(enum.Enum):
    """Ticket statuses"""
    OPEN = "open"
    CLOSED = "closed"


class Ticket(Base):
    """A ticket channel and who opened/closed it"""
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(primary_key=True)
    channel_id: Mapped[int] = mapped_column(BigInteger, unique=True, index=True)
    channel_name: Mapped[str] = mapped_column(String(100))

    opener_id: Mapped[int] = mapped_column(BigInteger, index=True)
    opener_name: Mapped[str] = mapped_column(String(255))

    status: Mapped[TicketStatus] = mapped_column(
        Enum(TicketStatus),
        default=TicketStatus.OPEN
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    closed_by_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    transcript_lines: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    @property
    def is_closed(self) -> bool:
        return self.status == TicketStatus.CLOSED
