"""
Ticket bot errors
Error kinds raised by the lifecycle manager, archiver and dispatcher
"""


class TicketBotError(Exception):
    """Base class for bot errors"""


class ConfigurationError(TicketBotError):
    """Required settings are missing or malformed"""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


class ChannelCreationError(TicketBotError):
    """The platform refused to create a ticket channel or container"""


class PermissionEditError(TicketBotError):
    """A single permission overwrite could not be rewritten"""

    def __init__(self, target_id: int, reason: str):
        self.target_id = target_id
        super().__init__(f"Failed to edit overwrite for {target_id}: {reason}")


class TranscriptDeliveryError(TicketBotError):
    """The transcript could not be delivered to the audit-log channel"""


class UnrecognizedAction(TicketBotError):
    """An inbound action does not match the actor's current flow step"""

    def __init__(self, custom_id: str | None, reason: str = "unexpected action"):
        self.custom_id = custom_id
        self.reason = reason
        super().__init__(f"Unrecognized action {custom_id!r}: {reason}")


class CloseNotPermitted(TicketBotError):
    """The actor is neither staff nor the ticket opener"""
