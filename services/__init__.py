from services.ticket_service import TicketService
from services.channel_manager import ChannelLifecycleManager, is_ticket_channel, ticket_channel_name
from services.transcript import ArchiveReport, TranscriptArchiver, render_transcript

__all__ = [
    "TicketService",
    "ChannelLifecycleManager",
    "is_ticket_channel",
    "ticket_channel_name",
    "ArchiveReport",
    "TranscriptArchiver",
    "render_transcript",
]
