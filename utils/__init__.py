from utils.errors import (
    ChannelCreationError,
    CloseNotPermitted,
    ConfigurationError,
    PermissionEditError,
    TicketBotError,
    TranscriptDeliveryError,
    UnrecognizedAction,
)

__all__ = [
    "ChannelCreationError",
    "CloseNotPermitted",
    "ConfigurationError",
    "PermissionEditError",
    "TicketBotError",
    "TranscriptDeliveryError",
    "UnrecognizedAction",
]
