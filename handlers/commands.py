"""
Slash commands
"""
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from handlers.dispatcher import InteractionDispatcher


class TicketCommands(commands.Cog):
    """setup_tickets, conprob, faq, close"""

    def __init__(self, dispatcher: InteractionDispatcher):
        self.dispatcher = dispatcher

    @app_commands.command(name="setup_tickets", description="Post the “Open Ticket” panel in the current channel.")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def setup_tickets(self, interaction: discord.Interaction):
        await self.dispatcher.run(interaction, self.dispatcher.setup_tickets)

    @app_commands.command(name="conprob", description="Tag a user and suggest trying a connection link.")
    @app_commands.describe(
        user="User to tag",
        link="Direct connect link (e.g., fivem://connect/IP:PORT)"
    )
    @app_commands.guild_only()
    async def conprob(self, interaction: discord.Interaction, user: discord.User, link: Optional[str] = None):
        await self.dispatcher.run(interaction, self.dispatcher.conprob, user, link)

    @app_commands.command(name="faq", description="Show where to read the FAQ (if configured).")
    @app_commands.guild_only()
    async def faq(self, interaction: discord.Interaction):
        await self.dispatcher.run(interaction, self.dispatcher.faq)

    @app_commands.command(name="close", description="Close this ticket and archive a simple transcript.")
    @app_commands.default_permissions(manage_channels=True)
    @app_commands.guild_only()
    async def close(self, interaction: discord.Interaction):
        await self.dispatcher.run(interaction, self.dispatcher.close_command)
