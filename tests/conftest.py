from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

from config import Settings
from database import Database

GUILD_ID = 100
SUPPORT_ROLE_ID = 900
LOG_CHANNEL_ID = 500

_ids = itertools.count(10_000)


class FakeUser:
    def __init__(self, id: int, name: str):
        self.id = id
        self.name = name

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"

    def __str__(self) -> str:
        return self.name


class FakeRole:
    def __init__(self, id: int, name: str):
        self.id = id
        self.name = name

    def __str__(self) -> str:
        return self.name


@dataclass
class FakeAttachment:
    url: str


@dataclass
class FakeMessage:
    author: FakeUser
    created_at: datetime
    clean_content: str
    attachments: list = field(default_factory=list)


class AsyncIter:
    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self._gen()

    async def _gen(self):
        for item in self._items:
            yield item


def make_category(id: int, name: str) -> MagicMock:
    category = MagicMock(spec=discord.CategoryChannel)
    category.id = id
    category.name = name
    return category


class FakeTextChannel:
    def __init__(self, id, name, guild, overwrites=None, category=None, topic=None, messages=()):
        self.id = id
        self.name = name
        self.guild = guild
        self.overwrites = dict(overwrites or {})
        self.category = category
        self.topic = topic
        self.messages = list(messages)
        self.send = AsyncMock()
        self.set_permissions = AsyncMock(side_effect=self._set_permissions)

    @property
    def mention(self) -> str:
        return f"<#{self.id}>"

    async def _set_permissions(self, target, *, overwrite=None, reason=None):
        self.overwrites[target] = overwrite

    def history(self, limit=100):
        return AsyncIter(self.messages[:limit])


class FakeGuild:
    def __init__(self, id: int = GUILD_ID, roles=(), channels=()):
        self.id = id
        self.default_role = FakeRole(id, "@everyone")
        self.roles = {role.id: role for role in roles}
        self.channels = {channel.id: channel for channel in channels}
        self.create_category = AsyncMock(side_effect=self._create_category)
        self.create_text_channel = AsyncMock(side_effect=self._create_text_channel)

    @property
    def categories(self):
        return [c for c in self.channels.values() if isinstance(c, discord.CategoryChannel)]

    def get_role(self, role_id):
        return self.roles.get(role_id)

    def get_channel(self, channel_id):
        return self.channels.get(channel_id)

    def add_channel(self, channel):
        self.channels[channel.id] = channel
        return channel

    async def _create_category(self, name, *, overwrites=None, reason=None):
        category = make_category(next(_ids), name)
        category.overwrites = dict(overwrites or {})
        return self.add_channel(category)

    async def _create_text_channel(self, name, *, category=None, overwrites=None, topic=None, reason=None):
        return self.add_channel(
            FakeTextChannel(next(_ids), name, self, overwrites=overwrites, category=category, topic=topic)
        )


def http_error(status: int = 403, text: str = "Missing Permissions") -> discord.HTTPException:
    return discord.HTTPException(MagicMock(status=status, reason="error"), text)


def make_interaction(
    user,
    guild=None,
    channel=None,
    custom_id=None,
    values=None,
    message_id=None,
    manage_channels=False,
    prompt_id=4242,
):
    interaction = MagicMock()
    interaction.user = user
    interaction.guild = guild
    interaction.channel = channel
    interaction.channel_id = getattr(channel, "id", None)
    interaction.data = {"custom_id": custom_id}
    if values is not None:
        interaction.data["values"] = values
    interaction.message = MagicMock(id=message_id) if message_id is not None else None
    interaction.permissions = discord.Permissions(manage_channels=manage_channels)

    state = {"done": False}

    def _mark_done(*args, **kwargs):
        state["done"] = True

    response = MagicMock()
    response.send_message = AsyncMock(side_effect=_mark_done)
    response.edit_message = AsyncMock(side_effect=_mark_done)
    response.defer = AsyncMock(side_effect=_mark_done)
    response.is_done = MagicMock(side_effect=lambda: state["done"])
    interaction.response = response

    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.original_response = AsyncMock(return_value=MagicMock(id=prompt_id))
    interaction.edit_original_response = AsyncMock()
    return interaction


@pytest.fixture
def settings() -> Settings:
    return Settings(
        discord_token="token",
        guild_id=GUILD_ID,
        support_role_id=SUPPORT_ROLE_ID,
        log_channel_id=LOG_CHANNEL_ID,
    )


@pytest.fixture
def support_role() -> FakeRole:
    return FakeRole(SUPPORT_ROLE_ID, "Support")


@pytest.fixture
def log_channel() -> MagicMock:
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = LOG_CHANNEL_ID
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def guild(support_role, log_channel) -> FakeGuild:
    return FakeGuild(roles=[support_role], channels=[log_channel])


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite://")
    await db.init_db()
    yield db
    await db.close()
