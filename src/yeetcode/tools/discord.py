"""
Discord reply delivery
- posts interaction responses to the interaction callback endpoint
- authenticates with the bot token
"""
import logging
from typing import Optional

import requests

from yeetcode.api.schemas.interactions import Interaction, InteractionResponse

logger = logging.getLogger(__name__)

API_BASE = "https://discord.com/api/v10"
USER_AGENT = "DiscordBot (https://github.com/sudomateo/yeetcode, 0.1.0)"
DEFAULT_TIMEOUT = 20.0


class DiscordError(RuntimeError):
    """Delivering a response to Discord failed."""


class DiscordClient:
    def __init__(
        self,
        token: str,
        session: Optional[requests.Session] = None,
        api_base: str = API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bot {token}",
            "User-Agent": USER_AGENT,
        })
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    def callback_url(self, interaction: Interaction) -> str:
        return f"{self.api_base}/interactions/{interaction.id}/{interaction.token}/callback"

    def respond(self, interaction: Interaction, response: InteractionResponse) -> None:
        """Send response as the reply to interaction."""
        payload = response.model_dump(mode="json", exclude_none=True)
        try:
            resp = self.session.post(self.callback_url(interaction), json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DiscordError(f"failed responding to interaction {interaction.id}: {exc}") from exc
        logger.debug("delivered response type=%s to interaction %s", response.type, interaction.id)

    def close(self) -> None:
        self.session.close()
