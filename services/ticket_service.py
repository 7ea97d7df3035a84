"""
Ticket registry service
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Ticket, TicketStatus


class TicketService:
    """Ticket registry operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_ticket(
        self,
        channel_id: int,
        channel_name: str,
        opener_id: int,
        opener_name: str
    ) -> Ticket:
        """Record a freshly created ticket channel"""
        ticket = Ticket(
            channel_id=channel_id,
            channel_name=channel_name,
            opener_id=opener_id,
            opener_name=opener_name,
            status=TicketStatus.OPEN
        )
        self.session.add(ticket)
        await self.session.commit()
        await self.session.refresh(ticket)
        return ticket

    async def get_ticket_by_channel_id(self, channel_id: int) -> Optional[Ticket]:
        """Get the ticket for a channel"""
        result = await self.session.execute(
            select(Ticket).where(Ticket.channel_id == channel_id)
        )
        return result.scalar_one_or_none()

    async def close_ticket(
        self,
        ticket: Ticket,
        closed_by_id: int,
        transcript_lines: Optional[int] = None
    ) -> Ticket:
        """Mark a ticket closed"""
        ticket.status = TicketStatus.CLOSED
        ticket.closed_by_id = closed_by_id
        ticket.transcript_lines = transcript_lines
        ticket.closed_at = datetime.now(timezone.utc).replace(tzinfo=None)
        await self.session.commit()
        await self.session.refresh(ticket)
        return ticket

    async def get_open_tickets_count(self) -> int:
        """Number of open tickets"""
        result = await self.session.execute(
            select(func.count(Ticket.id)).where(Ticket.status == TicketStatus.OPEN)
        )
        return result.scalar() or 0
