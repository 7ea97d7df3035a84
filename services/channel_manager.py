"""
Ticket channel lifecycle
Creates the tickets category and ticket channels, owns every permission overwrite
"""
import asyncio
import logging
import re
from typing import Optional, Union

import discord
from sqlalchemy.exc import SQLAlchemyError

from config import Settings
from database import Database, Ticket
from keyboards import TicketEmbeds, TicketKeyboards
from services.ticket_service import TicketService
from utils.errors import ChannelCreationError, CloseNotPermitted, PermissionEditError

logger = logging.getLogger(__name__)

TICKETS_CATEGORY_NAME = "Tickets"

_NAME_STRIP = re.compile(r"[^a-z0-9-]")
_OPENER_TOPIC = re.compile(r"opener:(\d+)")

# view + send + read history
_MEMBER_ACCESS = dict(view_channel=True, send_messages=True, read_message_history=True)


def ticket_channel_name(opener_name: str) -> str:
    """ticket-<name>, lowercased, anything outside [a-z0-9-] dropped"""
    return _NAME_STRIP.sub("", f"ticket-{opener_name}".lower())


def opener_topic(opener: Union[discord.Member, discord.User]) -> str:
    return f"Ticket opened by {opener} | opener:{opener.id}"


def opener_from_topic(topic: Optional[str]) -> Optional[int]:
    """Opener id stored in the channel topic, if any"""
    if not topic:
        return None
    match = _OPENER_TOPIC.search(topic)
    return int(match.group(1)) if match else None


def is_ticket_channel(channel) -> bool:
    """The channel sits in a category whose name contains "ticket" """
    category = getattr(channel, "category", None)
    return isinstance(category, discord.CategoryChannel) and "ticket" in category.name.lower()


class ChannelLifecycleManager:
    """Ticket category, ticket channels and their permissions"""

    def __init__(self, settings: Settings, database: Database):
        self.settings = settings
        self.database = database
        self._containers: dict[int, discord.CategoryChannel] = {}
        self._container_lock = asyncio.Lock()

    def support_role(self, guild: discord.Guild) -> Union[discord.Role, discord.Object]:
        role = guild.get_role(self.settings.support_role_id)
        if role is None:
            return discord.Object(id=self.settings.support_role_id, type=discord.Role)
        return role

    # ==================== CATEGORY ====================

    async def resolve_or_create_tickets_container(self, guild: discord.Guild) -> discord.CategoryChannel:
        """
        The single category that holds every ticket channel

        Order: configured TICKETS_CATEGORY_ID, then a category named "tickets"
        (any case), then a new one visible only to the support role.
        """
        async with self._container_lock:
            if self.settings.tickets_category_id:
                configured = guild.get_channel(self.settings.tickets_category_id)
                if isinstance(configured, discord.CategoryChannel):
                    return configured
                logger.warning(
                    f"TICKETS_CATEGORY_ID={self.settings.tickets_category_id} is not a category, "
                    f"falling back to lookup by name"
                )

            known = self._containers.get(guild.id)
            if known is not None:
                return known

            existing = discord.utils.find(
                lambda c: c.name.lower() == TICKETS_CATEGORY_NAME.lower(),
                guild.categories
            )
            if existing is not None:
                self._containers[guild.id] = existing
                return existing

            overwrites = {
                guild.default_role: discord.PermissionOverwrite(view_channel=False),
                self.support_role(guild): discord.PermissionOverwrite(view_channel=True),
            }
            try:
                category = await guild.create_category(
                    TICKETS_CATEGORY_NAME,
                    overwrites=overwrites,
                    reason="Ticket category"
                )
            except discord.HTTPException as e:
                raise ChannelCreationError(f"Failed to create tickets category: {e}") from e

            logger.info(f"Created tickets category {category.id} in guild {guild.id}")
            self._containers[guild.id] = category
            return category

    def forget_container(self, channel) -> None:
        """Drop a remembered category once it is deleted"""
        for guild_id, category in list(self._containers.items()):
            if category.id == channel.id:
                del self._containers[guild_id]
                logger.info(f"Tickets category {channel.id} was deleted")

    # ==================== TICKET CHANNELS ====================

    def ticket_overwrites(
        self,
        guild: discord.Guild,
        opener: Union[discord.Member, discord.User]
    ) -> dict:
        """everyone denied, support role and opener granted view/send/history"""
        return {
            guild.default_role: discord.PermissionOverwrite(view_channel=False),
            self.support_role(guild): discord.PermissionOverwrite(**_MEMBER_ACCESS),
            opener: discord.PermissionOverwrite(**_MEMBER_ACCESS),
        }

    async def create_ticket_channel(
        self,
        guild: discord.Guild,
        opener: Union[discord.Member, discord.User]
    ) -> discord.TextChannel:
        """Create a private ticket channel and post the intro message"""
        category = await self.resolve_or_create_tickets_container(guild)
        name = ticket_channel_name(opener.name)

        try:
            channel = await guild.create_text_channel(
                name,
                category=category,
                overwrites=self.ticket_overwrites(guild, opener),
                topic=opener_topic(opener),
                reason=f"Ticket opened by {opener}"
            )
        except discord.HTTPException as e:
            raise ChannelCreationError(f"Failed to create ticket channel {name!r}: {e}") from e

        logger.info(f"Created ticket channel {channel.id} ({name}) for user {opener.id}")
        await self._register(channel, opener)

        support = self.support_role(guild)
        try:
            await channel.send(
                content=f"{opener.mention} <@&{self.settings.support_role_id}>",
                embed=TicketEmbeds.ticket_created(),
                view=TicketKeyboards.close_ticket(),
                allowed_mentions=discord.AllowedMentions(users=[opener], roles=[support])
            )
        except discord.HTTPException as e:
            logger.error(f"Failed to post intro into ticket {channel.id}: {e}", exc_info=True)

        return channel

    async def lock_ticket_channel(self, channel: discord.TextChannel) -> list[PermissionEditError]:
        """
        Deny send for every overwrite except the support role's

        Each overwrite is rewritten on its own; failures are logged and returned,
        the remaining overwrites are still processed.
        """
        failures: list[PermissionEditError] = []
        for target, overwrite in list(channel.overwrites.items()):
            if target.id == self.settings.support_role_id:
                continue
            locked = discord.PermissionOverwrite.from_pair(*overwrite.pair())
            locked.update(send_messages=False)
            try:
                await channel.set_permissions(target, overwrite=locked, reason="Ticket closed")
            except discord.HTTPException as e:
                error = PermissionEditError(target.id, str(e))
                logger.error(f"Failed to lock ticket {channel.id} for {target.id}: {e}")
                failures.append(error)
        return failures

    # ==================== AUTHORIZATION ====================

    async def resolve_opener_id(self, channel) -> Optional[int]:
        """Opener from the registry, then from the channel topic"""
        ticket = await self.get_ticket(channel.id)
        if ticket is not None:
            return ticket.opener_id
        return opener_from_topic(getattr(channel, "topic", None))

    async def ensure_can_close(self, actor, channel, permissions: discord.Permissions) -> None:
        """Staff (manage_channels) or the ticket opener may close"""
        if permissions.manage_channels:
            return
        opener_id = await self.resolve_opener_id(channel)
        if opener_id is not None and actor.id == opener_id:
            return
        raise CloseNotPermitted(f"User {actor.id} may not close ticket {channel.id}")

    # ==================== REGISTRY ====================

    async def _register(self, channel: discord.TextChannel, opener) -> None:
        try:
            async with self.database.session_factory() as session:
                service = TicketService(session)
                await service.create_ticket(
                    channel_id=channel.id,
                    channel_name=channel.name,
                    opener_id=opener.id,
                    opener_name=str(opener)
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to register ticket {channel.id}: {e}", exc_info=True)

    async def get_ticket(self, channel_id: int) -> Optional[Ticket]:
        """Registry record for a channel"""
        try:
            async with self.database.session_factory() as session:
                return await TicketService(session).get_ticket_by_channel_id(channel_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read ticket {channel_id}: {e}", exc_info=True)
            return None

    async def record_close(self, channel_id: int, closed_by_id: int, transcript_lines: int) -> Optional[Ticket]:
        """Mark the registry record closed"""
        async with self.database.session_factory() as session:
            service = TicketService(session)
            ticket = await service.get_ticket_by_channel_id(channel_id)
            if ticket is None:
                logger.warning(f"Ticket {channel_id} is not in the registry, close not recorded")
                return None
            return await service.close_ticket(ticket, closed_by_id, transcript_lines)

    async def open_tickets_count(self) -> int:
        async with self.database.session_factory() as session:
            return await TicketService(session).get_open_tickets_count()
