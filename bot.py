"""
Discord client for the ticket bot
"""
import logging

import discord
from discord.ext import commands, tasks

from config import Settings
from database import Database
from handlers import InteractionDispatcher, TicketCommands
from services import ChannelLifecycleManager, TranscriptArchiver
from utils.session_store import FlowSessionStore

logger = logging.getLogger(__name__)


class TicketBot(commands.Bot):
    """Wires settings, registry and services into one client"""

    def __init__(self, settings: Settings, database: Database):
        intents = discord.Intents.default()
        intents.members = True
        intents.message_content = True
        super().__init__(command_prefix=commands.when_mentioned, intents=intents)

        self.settings = settings
        self.database = database
        self.sessions = FlowSessionStore(ttl=settings.flow_session_ttl)
        self.channel_manager = ChannelLifecycleManager(settings, database)
        self.archiver = TranscriptArchiver(settings, self.channel_manager)
        self.dispatcher = InteractionDispatcher(
            settings,
            self.channel_manager,
            self.archiver,
            self.sessions
        )

    async def setup_hook(self):
        """Database, commands, background tasks"""
        logger.info("Initializing database...")
        await self.database.init_db()

        await self.add_cog(TicketCommands(self.dispatcher))
        guild = discord.Object(id=self.settings.guild_id)
        self.tree.copy_global_to(guild=guild)
        synced = await self.tree.sync(guild=guild)
        logger.info(f"Slash commands registered: {', '.join(c.name for c in synced)}")

        self.prune_sessions.start()

    async def on_ready(self):
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")
        logger.info(f"GUILD_ID: {self.settings.guild_id}")
        logger.info(f"SUPPORT_ROLE_ID: {self.settings.support_role_id}")
        logger.info(f"LOG_CHANNEL_ID: {self.settings.log_channel_id}")

        guild = self.get_guild(self.settings.guild_id)
        if guild is None:
            logger.error(f"Bot is not a member of guild {self.settings.guild_id}")
            return
        log_channel = guild.get_channel(self.settings.log_channel_id)
        if log_channel is None:
            logger.error(f"Cannot access log channel {self.settings.log_channel_id}")
        else:
            logger.info(f"Log channel: #{log_channel.name} (ID: {log_channel.id})")
        logger.info(f"Open tickets in registry: {await self.channel_manager.open_tickets_count()}")

    async def on_interaction(self, interaction: discord.Interaction):
        if interaction.type == discord.InteractionType.component:
            await self.dispatcher.dispatch_component(interaction)

    async def on_guild_channel_delete(self, channel):
        if isinstance(channel, discord.CategoryChannel):
            self.channel_manager.forget_container(channel)

    @tasks.loop(minutes=5)
    async def prune_sessions(self):
        removed = await self.sessions.prune()
        if removed:
            logger.debug(f"Pruned {removed} expired flow sessions")

    async def close(self):
        logger.info("Stopping bot...")
        if self.prune_sessions.is_running():
            self.prune_sessions.cancel()
        await super().close()
        await self.database.close()
        logger.info("Bot stopped")
