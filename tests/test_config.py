import pytest

from config import DEFAULT_CONNECT_LINK, DEFAULT_DATABASE_URL, load_settings
from utils.errors import ConfigurationError

REQUIRED = {
    "DISCORD_TOKEN": "abc",
    "GUILD_ID": "1",
    "SUPPORT_ROLE_ID": "2",
    "LOG_CHANNEL_ID": "3",
}


def test_loads_required_settings_with_defaults():
    settings = load_settings(REQUIRED)
    assert settings.discord_token == "abc"
    assert settings.guild_id == 1
    assert settings.support_role_id == 2
    assert settings.log_channel_id == 3
    assert settings.tickets_category_id is None
    assert settings.faq_channel_id is None
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.default_connect_link == DEFAULT_CONNECT_LINK
    assert settings.flow_session_ttl == 900


def test_optional_settings():
    env = dict(
        REQUIRED,
        TICKETS_CATEGORY_ID="44",
        FAQ_CHANNEL_ID="55",
        FLOW_SESSION_TTL="120",
        LOG_LEVEL="debug",
    )
    settings = load_settings(env)
    assert settings.tickets_category_id == 44
    assert settings.faq_channel_id == 55
    assert settings.flow_session_ttl == 120
    assert settings.log_level == "DEBUG"


def test_settings_are_immutable():
    settings = load_settings(REQUIRED)
    with pytest.raises(AttributeError):
        settings.guild_id = 5


def test_missing_required_settings_are_all_reported():
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings({"GUILD_ID": "1"})
    problems = " ".join(exc_info.value.problems)
    assert "DISCORD_TOKEN" in problems
    assert "SUPPORT_ROLE_ID" in problems
    assert "LOG_CHANNEL_ID" in problems
    assert "GUILD_ID" not in problems


def test_non_numeric_ids_are_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(dict(REQUIRED, GUILD_ID="my-guild", FAQ_CHANNEL_ID="faq"))
    assert len(exc_info.value.problems) == 2
