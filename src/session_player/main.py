#!/usr/bin/env python3
"""Entry point: load settings, configure logging and run the Discord host."""

from __future__ import annotations

import logging
import sys

from session_player.domain.shared.messages import ErrorMessages, LogTemplates
from session_player.utils.logging import setup_logging


def main() -> int:
    from session_player.config.settings import get_settings

    settings = get_settings()
    setup_logging("DEBUG" if settings.debug else settings.log_level)

    logger = logging.getLogger(__name__)

    token_value = settings.discord.token.get_secret_value()
    if not token_value:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    logger.info(LogTemplates.HOST_STARTING, settings.environment)

    from session_player.config.container import create_container
    from session_player.infrastructure.discord.client import create_client

    container = create_container(settings)
    client = create_client(container)

    try:
        # log_handler=None keeps discord.py from replacing our handler
        client.run(token_value, log_handler=None)
        logger.info(LogTemplates.HOST_STOPPED)
        return 0
    except KeyboardInterrupt:
        logger.info(LogTemplates.HOST_KEYBOARD_INTERRUPT)
        return 0
    except Exception as e:
        logger.exception(LogTemplates.HOST_FATAL_ERROR, e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
