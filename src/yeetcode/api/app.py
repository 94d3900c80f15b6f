"""Application factory for the yeetcode interactions backend."""

from typing import Optional

from fastapi import FastAPI

from yeetcode.configuration import Settings
from yeetcode.telemetry import Telemetry
from yeetcode.tools.discord import DiscordClient
from yeetcode.tools.leetcode import LeetCodeClient
from yeetcode.verification import InteractionVerifier

from .routes import api_router
from .services.interaction_service import InteractionService


def create_app(
    settings: Settings,
    *,
    verifier: Optional[InteractionVerifier] = None,
    question_client: Optional[LeetCodeClient] = None,
    discord_client: Optional[DiscordClient] = None,
    telemetry: Optional[Telemetry] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    app = FastAPI(
        title="yeetcode",
        description="Discord interactions endpoint that hands out random LeetCode problems.",
        version="0.1.0",
    )

    telemetry = telemetry or Telemetry.disabled()
    app.state.settings = settings
    app.state.telemetry = telemetry
    app.state.interaction_service = InteractionService(
        verifier=verifier or InteractionVerifier(settings.discord_public_key),
        question_client=question_client or LeetCodeClient(),
        discord_client=discord_client or DiscordClient(settings.discord_token),
        tracer=telemetry.tracer,
    )

    app.include_router(api_router)

    return app
