"""Process entrypoint: `python -m yeetcode` or the `yeetcode` console script."""

import asyncio
import logging
import sys
from typing import Optional

from yeetcode.api.app import create_app
from yeetcode.configuration import ConfigurationError, Settings
from yeetcode.server import ListenerError, ServerLifecycle, ShutdownTimeout, build_server
from yeetcode.telemetry import setup_telemetry
from yeetcode.tools.discord import DiscordClient
from yeetcode.tools.leetcode import LeetCodeClient

logger = logging.getLogger("yeetcode")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


def run(settings: Settings) -> None:
    telemetry = setup_telemetry(settings)
    question_client = LeetCodeClient()
    discord_client = DiscordClient(settings.discord_token)
    try:
        app = create_app(
            settings,
            question_client=question_client,
            discord_client=discord_client,
            telemetry=telemetry,
        )
        server = build_server(app, settings.host, settings.port)
        logger.info("starting http server addr=%s:%d", settings.host, settings.port)
        asyncio.run(ServerLifecycle(server, shutdown_timeout=settings.shutdown_timeout).run())
    finally:
        question_client.close()
        discord_client.close()
        telemetry.shutdown()


def main(settings: Optional[Settings] = None) -> int:
    configure_logging()
    try:
        settings = settings or Settings.from_env()
    except ConfigurationError as exc:
        logger.error("startup finished error=%s", exc)
        return 1

    logging.getLogger().setLevel(settings.log_level)

    try:
        run(settings)
    except (ListenerError, ShutdownTimeout) as exc:
        logger.error("server stopped error=%s", exc)
        return 1

    logger.info("server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
