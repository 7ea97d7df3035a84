"""
Embeds for the ticket flow
"""
from typing import Optional

import discord


def _faq_location(faq_channel_id: Optional[int], fallback: str) -> str:
    return f"<#{faq_channel_id}>" if faq_channel_id else fallback


class TicketEmbeds:
    """Embeds shown to users and posted into ticket channels"""

    @staticmethod
    def intro(requested_by: str, faq_channel_id: Optional[int] = None) -> discord.Embed:
        """Entry panel"""
        faq_where = f" in <#{faq_channel_id}>" if faq_channel_id else ""
        embed = discord.Embed(
            title="🎟️ Need help?",
            description=(
                "Let’s make sure we help you efficiently.\n\n"
                f"1) **Have you read our FAQ**{faq_where}?\n"
                "2) **Do you need in-game support** or something else?\n"
                "3) If in-game: **Have you filed an in-game /report** already?\n\n"
                "Click **Open Ticket** to begin."
            ),
            timestamp=discord.utils.utcnow()
        )
        embed.set_footer(text=f"Requested by {requested_by}")
        return embed

    @staticmethod
    def faq_prompt(faq_channel_id: Optional[int] = None) -> discord.Embed:
        if faq_channel_id:
            description = (
                f"Please confirm you have read the FAQ in <#{faq_channel_id}>. "
                "It may already solve your issue."
            )
        else:
            description = "Please confirm you have read the server’s FAQ or pinned guides."
        return discord.Embed(title="Step 1/3 — Have you read the FAQ?", description=description)

    @staticmethod
    def read_faq_first(faq_channel_id: Optional[int] = None) -> discord.Embed:
        where = _faq_location(faq_channel_id, "the server’s FAQ/pins")
        return discord.Embed(
            title="Please read the FAQ first 🙏",
            description=f"Check {where} and then try again."
        )

    @staticmethod
    def category_chooser() -> discord.Embed:
        return discord.Embed(
            title="Step 2/3 — What kind of support do you need?",
            description="Choose one option below."
        )

    @staticmethod
    def ingame_report_prompt() -> discord.Embed:
        return discord.Embed(
            title="Step 3/3 — Did you make an in-game /report?",
            description="If not, please try **/report** in-game first; staff often responds quicker there."
        )

    @staticmethod
    def file_report_first() -> discord.Embed:
        return discord.Embed(
            title="Please file an in-game /report first",
            description=(
                "Open FiveM, join the server, and type **/report** with a short description. "
                "If you still need help afterward, open a ticket again."
            )
        )

    @staticmethod
    def ticket_created() -> discord.Embed:
        """First message inside a new ticket channel"""
        return discord.Embed(
            title="Ticket created",
            description=(
                "Please describe your issue with as much detail as possible "
                "(what you tried, screenshots/logs, etc.). "
                "A staff member will be with you shortly."
            ),
            timestamp=discord.utils.utcnow()
        )
