"""
Bot configuration
Create a .env file with:
    DISCORD_TOKEN=your_discord_bot_token_here
    GUILD_ID=123456789012345678
    SUPPORT_ROLE_ID=123456789012345678
    LOG_CHANNEL_ID=123456789012345678
    TICKETS_CATEGORY_ID=123456789012345678   (optional)
    FAQ_CHANNEL_ID=123456789012345678        (optional)
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from utils.errors import ConfigurationError

REQUIRED_IDS = ("GUILD_ID", "SUPPORT_ROLE_ID", "LOG_CHANNEL_ID")
OPTIONAL_IDS = ("TICKETS_CATEGORY_ID", "FAQ_CHANNEL_ID")

DEFAULT_DATABASE_URL = "sqlite+aiosqlite://"
DEFAULT_CONNECT_LINK = "fivem://connect/YOUR-IP:PORT"
DEFAULT_SESSION_TTL = 900
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, loaded once and passed to every component"""
    discord_token: str
    guild_id: int
    support_role_id: int
    log_channel_id: int
    tickets_category_id: Optional[int] = None
    faq_channel_id: Optional[int] = None
    database_url: str = DEFAULT_DATABASE_URL
    flow_session_ttl: int = DEFAULT_SESSION_TTL
    default_connect_link: str = DEFAULT_CONNECT_LINK
    log_level: str = "INFO"


def _parse_id(name: str, raw: str, problems: list[str]) -> Optional[int]:
    raw = raw.strip()
    if not raw.isdigit():
        problems.append(f"{name} must be a numeric id, got {raw!r}")
        return None
    return int(raw)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment

    Reads .env first when no explicit mapping is given. Every missing or
    malformed variable is reported at once in a single ConfigurationError.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    problems: list[str] = []
    ids: dict[str, Optional[int]] = {}

    token = env.get("DISCORD_TOKEN", "").strip()
    if not token:
        problems.append("DISCORD_TOKEN is not set")

    for name in REQUIRED_IDS:
        raw = env.get(name, "")
        if not raw.strip():
            problems.append(f"{name} is not set")
            continue
        ids[name] = _parse_id(name, raw, problems)

    for name in OPTIONAL_IDS:
        raw = env.get(name, "")
        ids[name] = _parse_id(name, raw, problems) if raw.strip() else None

    ttl_raw = env.get("FLOW_SESSION_TTL", "").strip()
    ttl = DEFAULT_SESSION_TTL
    if ttl_raw:
        if ttl_raw.isdigit() and int(ttl_raw) > 0:
            ttl = int(ttl_raw)
        else:
            problems.append(f"FLOW_SESSION_TTL must be a positive integer, got {ttl_raw!r}")

    log_level = env.get("LOG_LEVEL", "").strip().upper() or "INFO"
    if log_level not in LOG_LEVELS:
        problems.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    if problems:
        raise ConfigurationError(problems)

    return Settings(
        discord_token=token,
        guild_id=ids["GUILD_ID"],
        support_role_id=ids["SUPPORT_ROLE_ID"],
        log_channel_id=ids["LOG_CHANNEL_ID"],
        tickets_category_id=ids["TICKETS_CATEGORY_ID"],
        faq_channel_id=ids["FAQ_CHANNEL_ID"],
        database_url=env.get("DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL,
        flow_session_ttl=ttl,
        default_connect_link=env.get("DEFAULT_CONNECT_LINK", "").strip() or DEFAULT_CONNECT_LINK,
        log_level=log_level,
    )
