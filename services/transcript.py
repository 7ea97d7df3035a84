"""
Ticket transcripts and closing
Archive, then lock: capture recent history, deliver it to the log channel,
deny send in the channel, record the close and post the closing notice.
"""
import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Iterable, Optional

import discord

from config import Settings
from services.channel_manager import ChannelLifecycleManager
from utils.errors import TranscriptDeliveryError

logger = logging.getLogger(__name__)

TRANSCRIPT_LIMIT = 100
EMPTY_TRANSCRIPT = "No messages."

STEP_FETCH = "fetch"
STEP_DELIVER = "deliver"
STEP_LOCK = "lock"
STEP_RECORD = "record"
STEP_NOTICE = "notice"


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with milliseconds, e.g. 2024-05-01T12:00:00.000Z"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_line(message) -> str:
    """[timestamp] author (id): text [attachments: url, url]"""
    author = message.author
    # one message per line
    content = (message.clean_content or "").replace("\r\n", "\n").replace("\n", "\\n")
    line = f"[{format_timestamp(message.created_at)}] {author} ({author.id}): {content}"
    if message.attachments:
        line += " [attachments: " + ", ".join(a.url for a in message.attachments) + "]"
    return line


def render_transcript(messages: Iterable) -> str:
    ordered = sorted(messages, key=lambda m: m.created_at)
    return "\n".join(render_line(m) for m in ordered) or EMPTY_TRANSCRIPT


@dataclass
class ArchiveReport:
    """Outcome of each close step; None means the step succeeded"""
    channel_id: int
    channel_name: str
    transcript: str = EMPTY_TRANSCRIPT
    message_count: int = 0
    steps: dict[str, Optional[Exception]] = field(default_factory=dict)

    def succeeded(self, step: str) -> bool:
        return step in self.steps and self.steps[step] is None

    @property
    def failed_steps(self) -> list[str]:
        return [name for name, error in self.steps.items() if error is not None]


class TranscriptArchiver:
    """Archives and locks ticket channels"""

    def __init__(self, settings: Settings, channels: ChannelLifecycleManager):
        self.settings = settings
        self.channels = channels

    async def fetch_messages(self, channel: discord.TextChannel) -> list:
        return [message async for message in channel.history(limit=TRANSCRIPT_LIMIT)]

    async def deliver(self, channel: discord.TextChannel, closed_by, report: ArchiveReport):
        """Send the transcript file to the audit-log channel"""
        log_channel = channel.guild.get_channel(self.settings.log_channel_id)
        if log_channel is None or not isinstance(log_channel, discord.abc.Messageable):
            raise TranscriptDeliveryError(
                f"Log channel {self.settings.log_channel_id} is not reachable"
            )

        content = f"🗂️ Ticket **{channel.name}** closed by <@{closed_by.id}>"
        kwargs = {}
        if report.succeeded(STEP_FETCH):
            kwargs["file"] = discord.File(
                io.BytesIO(report.transcript.encode("utf-8")),
                filename=f"{channel.name}-transcript.txt"
            )
        else:
            content += "\n⚠️ Transcript unavailable: channel history could not be read."

        try:
            await log_channel.send(
                content=content,
                allowed_mentions=discord.AllowedMentions.none(),
                **kwargs
            )
        except discord.HTTPException as e:
            raise TranscriptDeliveryError(f"Failed to send transcript to log channel: {e}") from e

    async def lock(self, channel: discord.TextChannel):
        failures = await self.channels.lock_ticket_channel(channel)
        if failures:
            raise failures[0]

    async def archive_ticket(self, channel: discord.TextChannel, closed_by) -> ArchiveReport:
        """
        Archive, then lock

        Every step runs even if an earlier one failed; the report says which failed.
        """
        report = ArchiveReport(channel_id=channel.id, channel_name=channel.name)

        messages = await self._run_step(report, STEP_FETCH, self.fetch_messages(channel))
        if messages is not None:
            report.transcript = render_transcript(messages)
            report.message_count = len(messages)

        await self._run_step(report, STEP_DELIVER, self.deliver(channel, closed_by, report))
        await self._run_step(report, STEP_LOCK, self.lock(channel))
        await self._run_step(
            report,
            STEP_RECORD,
            self.channels.record_close(channel.id, closed_by.id, report.message_count)
        )

        if report.succeeded(STEP_DELIVER):
            notice = "🔒 Ticket closed. Transcript saved to logs."
        else:
            notice = "🔒 Ticket closed. The transcript could not be saved to logs."
        await self._run_step(report, STEP_NOTICE, channel.send(content=notice))

        if report.failed_steps:
            logger.warning(
                f"Ticket {channel.id} closed by {closed_by.id} with failed steps: "
                f"{', '.join(report.failed_steps)}"
            )
        else:
            logger.info(f"Ticket {channel.id} closed by {closed_by.id} ({report.message_count} messages)")
        return report

    async def _run_step(self, report: ArchiveReport, name: str, step: Awaitable):
        try:
            result = await step
        except Exception as e:
            logger.error(f"Close step {name!r} failed for ticket {report.channel_id}: {e}", exc_info=True)
            report.steps[name] = e
            return None
        report.steps[name] = None
        return result
