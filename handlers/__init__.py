from handlers.dispatcher import InteractionDispatcher
from handlers.commands import TicketCommands

__all__ = ["InteractionDispatcher", "TicketCommands"]
