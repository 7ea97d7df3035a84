from database.connection import Database
from database.models import Base, Ticket, TicketStatus

__all__ = [
    "Database",
    "Base",
    "Ticket",
    "TicketStatus",
]
