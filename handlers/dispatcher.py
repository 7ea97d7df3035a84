"""
Interaction dispatcher
Routes slash commands and component presses to the flow machine,
the lifecycle manager and the archiver, and renders the result.

Response kinds:
    reply     - first response to a command or to the panel button
    update    - flow continuation, edits the live prompt in place
    follow-up - after the prompt was already finalized
"""
import logging
from typing import Awaitable, Callable, Optional

import discord

from config import Settings
from keyboards import TicketEmbeds, TicketKeyboards
from services.channel_manager import ChannelLifecycleManager, is_ticket_channel
from services.transcript import ArchiveReport, TranscriptArchiver
from states import (
    CustomId,
    FlowAction,
    FlowEffect,
    FlowStateMachine,
    SupportCategory,
    Transition,
    parse_action,
)
from utils.errors import ChannelCreationError, CloseNotPermitted, UnrecognizedAction
from utils.session_store import FlowSessionStore

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong handling that action."
UNRECOGNIZED_NOTICE = "That prompt is no longer active. Press **Open Ticket** to start again."
CREATION_FAILED = "❌ Could not create your ticket. Please try again later or contact staff."
CLOSE_DENIED = "Only staff or the person who opened this ticket can close it."
ALREADY_CLOSED = "This ticket is already closed."
NOT_A_TICKET = "Use /close inside a ticket channel."

_SELECTIONS = {
    FlowAction.CATEGORY_INGAME: SupportCategory.INGAME.value,
    FlowAction.CATEGORY_OTHER: SupportCategory.OTHER.value,
}


class InteractionDispatcher:
    """Boundary between the platform and the ticket logic"""

    def __init__(
        self,
        settings: Settings,
        channels: ChannelLifecycleManager,
        archiver: TranscriptArchiver,
        sessions: FlowSessionStore,
        machine: type[FlowStateMachine] = FlowStateMachine
    ):
        self.settings = settings
        self.channels = channels
        self.archiver = archiver
        self.sessions = sessions
        self.machine = machine

    # ==================== BOUNDARY ====================

    async def run(
        self,
        interaction: discord.Interaction,
        handler: Callable[..., Awaitable[None]],
        *args
    ) -> None:
        """Run a handler; any failure ends as one ephemeral notice"""
        try:
            await handler(interaction, *args)
        except UnrecognizedAction as e:
            logger.warning(f"Ignoring action from user {interaction.user.id}: {e}")
            await self._notify(interaction, UNRECOGNIZED_NOTICE)
        except CloseNotPermitted as e:
            logger.info(str(e))
            await self._notify(interaction, CLOSE_DENIED)
        except ChannelCreationError as e:
            logger.error(f"Ticket creation failed for user {interaction.user.id}: {e}", exc_info=True)
            await self._notify(interaction, CREATION_FAILED)
        except Exception as e:
            logger.error(f"Error handling interaction from user {interaction.user.id}: {e}", exc_info=True)
            await self._notify(interaction, GENERIC_FAILURE)

    async def _notify(self, interaction: discord.Interaction, text: str) -> None:
        try:
            if interaction.response.is_done():
                await interaction.followup.send(text, ephemeral=True)
            else:
                await interaction.response.send_message(text, ephemeral=True)
        except discord.HTTPException as e:
            logger.error(f"Failed to notify user {interaction.user.id}: {e}")

    async def dispatch_component(self, interaction: discord.Interaction) -> None:
        """Entry point for button presses and menu choices"""
        await self.run(interaction, self._route_component)

    async def _route_component(self, interaction: discord.Interaction) -> None:
        data = interaction.data or {}
        custom_id = data.get("custom_id")
        if custom_id == CustomId.CLOSE_TICKET.value:
            await self.close_button(interaction)
            return
        action = parse_action(custom_id, data.get("values") or ())
        await self.advance_flow(interaction, action)

    # ==================== COMMANDS ====================

    async def setup_tickets(self, interaction: discord.Interaction) -> None:
        """Post the entry panel in the current channel"""
        await interaction.response.send_message(
            embed=TicketEmbeds.intro(str(interaction.user), self.settings.faq_channel_id),
            view=TicketKeyboards.open_ticket()
        )
        logger.info(f"Ticket panel posted in channel {interaction.channel_id} by {interaction.user.id}")

    async def conprob(
        self,
        interaction: discord.Interaction,
        user: discord.abc.User,
        link: Optional[str] = None
    ) -> None:
        """Tag a user with connection troubleshooting steps"""
        link = link or self.settings.default_connect_link
        await interaction.response.send_message(
            f"Hey {user.mention}, if you’re having trouble connecting, try this link:\n"
            f"**{link}**\n\n"
            "• Make sure FiveM is closed before clicking.\n"
            "• Disable VPNs and turn off Windows Metered Connection.\n"
            "• If it still fails: restart router/PC and try again.",
            allowed_mentions=discord.AllowedMentions(everyone=False, roles=False, users=[user])
        )

    async def faq(self, interaction: discord.Interaction) -> None:
        if self.settings.faq_channel_id:
            text = f"Please read our FAQ in <#{self.settings.faq_channel_id}> first."
        else:
            text = "FAQ channel isn’t configured. Ask an admin to set `FAQ_CHANNEL_ID` in .env."
        await interaction.response.send_message(text, ephemeral=True)

    async def close_command(self, interaction: discord.Interaction) -> None:
        """/close, staff only, inside a ticket channel"""
        if not is_ticket_channel(interaction.channel):
            await interaction.response.send_message(NOT_A_TICKET, ephemeral=True)
            return
        await self._close(interaction, "Ticket closed and archived.")

    # ==================== FLOW ====================

    async def advance_flow(self, interaction: discord.Interaction, action: FlowAction) -> None:
        """Reconstruct the actor's step from the session map and apply the transition"""
        actor_id = interaction.user.id
        current = self.machine.initial_step()

        if action is not FlowAction.OPEN_TICKET:
            session = await self.sessions.get(actor_id)
            if session is None:
                raise UnrecognizedAction(action.value, "no active flow")
            message = interaction.message
            if session.prompt_id is not None and (message is None or message.id != session.prompt_id):
                raise UnrecognizedAction(action.value, "stale prompt")
            current = session.step

        transition = self.machine.transition(current, action)
        logger.info(
            f"Flow {actor_id}: {transition.current.value} -> {transition.next_step.value} "
            f"({action.value})"
        )
        await self._apply(interaction, transition)

    async def _apply(self, interaction: discord.Interaction, transition: Transition) -> None:
        actor_id = interaction.user.id
        effect = transition.effect

        if effect is FlowEffect.RENDER_FAQ_PROMPT:
            await interaction.response.send_message(
                embed=TicketEmbeds.faq_prompt(self.settings.faq_channel_id),
                view=TicketKeyboards.faq_step(),
                ephemeral=True
            )
            prompt_id = await self._prompt_id(interaction)
            await self.sessions.start(actor_id, transition.next_step, prompt_id)
            return

        if effect is FlowEffect.CREATE_TICKET_CHANNEL:
            # dropped before the channel exists so a replayed press cannot create a second one
            await self.sessions.discard(actor_id)
            await interaction.response.edit_message(content="Creating your ticket…", embeds=[], view=None)
            channel = await self.channels.create_ticket_channel(interaction.guild, interaction.user)
            await interaction.followup.send(f"✅ Ticket created: {channel.mention}", ephemeral=True)
            return

        embed, view = self._render(effect)
        if transition.is_terminal:
            await self.sessions.discard(actor_id)
        else:
            await self.sessions.advance(actor_id, transition.next_step, _SELECTIONS.get(transition.action))
        await interaction.response.edit_message(embed=embed, view=view)

    def _render(self, effect: FlowEffect) -> tuple[discord.Embed, Optional[discord.ui.View]]:
        faq_channel_id = self.settings.faq_channel_id
        if effect is FlowEffect.RENDER_CATEGORY_CHOOSER:
            return TicketEmbeds.category_chooser(), TicketKeyboards.support_type()
        if effect is FlowEffect.RENDER_INGAME_REPORT_PROMPT:
            return TicketEmbeds.ingame_report_prompt(), TicketKeyboards.ingame_report()
        if effect is FlowEffect.RENDER_READ_FAQ_FIRST:
            return TicketEmbeds.read_faq_first(faq_channel_id), None
        if effect is FlowEffect.RENDER_FILE_REPORT_FIRST:
            return TicketEmbeds.file_report_first(), None
        raise ValueError(f"No rendering for {effect}")

    async def _prompt_id(self, interaction: discord.Interaction) -> Optional[int]:
        try:
            message = await interaction.original_response()
        except discord.HTTPException as e:
            logger.warning(f"Could not fetch prompt for user {interaction.user.id}: {e}")
            return None
        return message.id

    # ==================== CLOSE ====================

    async def close_button(self, interaction: discord.Interaction) -> None:
        """Close control inside a ticket channel, staff or opener"""
        await self.channels.ensure_can_close(interaction.user, interaction.channel, interaction.permissions)
        await self._close(interaction, "Ticket closed.")

    async def _close(self, interaction: discord.Interaction, done_text: str) -> Optional[ArchiveReport]:
        channel = interaction.channel
        ticket = await self.channels.get_ticket(channel.id)
        if ticket is not None and ticket.is_closed:
            await interaction.response.send_message(ALREADY_CLOSED, ephemeral=True)
            return None

        await interaction.response.defer(ephemeral=True)
        report = await self.archiver.archive_ticket(channel, interaction.user)
        if report.failed_steps:
            done_text += f" Some steps failed ({', '.join(report.failed_steps)}), check the bot logs."
        await interaction.edit_original_response(content=done_text)
        return report
