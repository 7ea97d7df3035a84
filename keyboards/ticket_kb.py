"""
Component views for the ticket flow
"""
import discord

from states import CustomId, SupportCategory


class TicketKeyboards:
    """Buttons and menus for the ticket flow"""

    @staticmethod
    def open_ticket() -> discord.ui.View:
        """Entry panel button"""
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            custom_id=CustomId.OPEN_TICKET_BTN.value,
            style=discord.ButtonStyle.primary,
            label="Open Ticket",
            emoji="🎫"
        ))
        return view

    @staticmethod
    def faq_step() -> discord.ui.View:
        """Step 1: FAQ read?"""
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            custom_id=CustomId.STEP_FAQ_YES.value,
            style=discord.ButtonStyle.success,
            label="I read the FAQ ✅"
        ))
        view.add_item(discord.ui.Button(
            custom_id=CustomId.STEP_FAQ_NO.value,
            style=discord.ButtonStyle.danger,
            label="I haven't ❌"
        ))
        return view

    @staticmethod
    def support_type() -> discord.ui.View:
        """Step 2: kind of support"""
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Select(
            custom_id=CustomId.STEP_SUPPORT_SELECT.value,
            placeholder="Choose the type of support you need…",
            min_values=1,
            max_values=1,
            options=[
                discord.SelectOption(
                    label="In-game support",
                    value=SupportCategory.INGAME.value,
                    description="Issues while playing on the server"
                ),
                discord.SelectOption(
                    label="Other support",
                    value=SupportCategory.OTHER.value,
                    description="Discord, donations, bans, website, etc."
                ),
            ]
        ))
        return view

    @staticmethod
    def ingame_report() -> discord.ui.View:
        """Step 3: in-game /report filed?"""
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            custom_id=CustomId.STEP_INGAME_REPORT_YES.value,
            style=discord.ButtonStyle.success,
            label="Yes, I filed /report"
        ))
        view.add_item(discord.ui.Button(
            custom_id=CustomId.STEP_INGAME_REPORT_NO.value,
            style=discord.ButtonStyle.secondary,
            label="Not yet"
        ))
        return view

    @staticmethod
    def close_ticket() -> discord.ui.View:
        """Close control posted inside the ticket channel"""
        view = discord.ui.View(timeout=None)
        view.add_item(discord.ui.Button(
            custom_id=CustomId.CLOSE_TICKET.value,
            style=discord.ButtonStyle.danger,
            label="Close Ticket",
            emoji="🔒"
        ))
        return view
