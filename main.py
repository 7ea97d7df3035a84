"""
Discord Support Ticket Bot
Guided ticket opening, private ticket channels, archived closure with transcripts
"""
import asyncio
import logging
import sys

from bot import TicketBot
from config import load_settings
from database import Database
from utils.errors import ConfigurationError


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


async def main():
    """Main entry point"""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        for problem in e.problems:
            logger.error(problem)
        logger.error("Missing required env vars. Set DISCORD_TOKEN, GUILD_ID, SUPPORT_ROLE_ID, LOG_CHANNEL_ID in .env")
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)

    database = Database(settings.database_url)
    bot = TicketBot(settings, database)

    logger.info("Starting bot...")
    async with bot:
        await bot.start(settings.discord_token)


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    run()
