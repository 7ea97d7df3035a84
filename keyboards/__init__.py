from keyboards.embeds import TicketEmbeds
from keyboards.ticket_kb import TicketKeyboards

__all__ = ["TicketEmbeds", "TicketKeyboards"]
