"""memchat entry point."""

import logging

from aiohttp import web

from memchat.config import settings
from memchat.web.server import create_app

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Start the chat server."""
    logger.info("Starting memchat on %s:%d...", settings.host, settings.port)
    web.run_app(create_app(), host=settings.host, port=settings.port, print=None)


if __name__ == "__main__":
    main()
