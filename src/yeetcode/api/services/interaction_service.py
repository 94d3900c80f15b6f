"""Request pipeline for Discord interactions.

verify -> decode -> dispatch -> resolve difficulty -> fetch -> reply

Each step either returns a value or raises InteractionError; `handle` turns the
first failure into the single outcome written for the request.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Mapping, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode
from pydantic import ValidationError

from yeetcode.api.schemas.interactions import (
    ApplicationCommandData,
    Interaction,
    InteractionResponse,
    InteractionType,
)
from yeetcode.difficulty import Difficulty, resolve_difficulty
from yeetcode.tools.discord import DiscordClient, DiscordError
from yeetcode.tools.leetcode import LeetCodeClient, LeetCodeError, QuestionReference
from yeetcode.verification import InteractionVerifier

logger = logging.getLogger(__name__)

DIFFICULTY_OPTION = "difficulty"


class InteractionError(Exception):
    """A terminal failure for one request, with the status to answer with."""

    def __init__(self, status_code: int, reason: str):
        super().__init__(reason)
        self.status_code = status_code
        self.reason = reason


@dataclass(frozen=True)
class Outcome:
    status_code: int
    body: Optional[bytes] = None


class InteractionService:
    def __init__(
        self,
        verifier: InteractionVerifier,
        question_client: LeetCodeClient,
        discord_client: DiscordClient,
        tracer: Optional[trace.Tracer] = None,
        rng: Optional[random.Random] = None,
    ):
        self.verifier = verifier
        self.question_client = question_client
        self.discord_client = discord_client
        self.tracer = tracer or trace.NoOpTracer()
        self.rng = rng

    def handle(self, headers: Mapping[str, str], body: bytes) -> Outcome:
        """Process one inbound request and return its only outcome."""
        request_id = str(uuid.uuid4())
        started = time.perf_counter()

        with self.tracer.start_as_current_span("interaction") as span:
            span.set_attribute("request.id", request_id)
            try:
                outcome = self._process(span, headers, body)
            except InteractionError as exc:
                if exc.__cause__ is not None:
                    span.record_exception(exc.__cause__)
                span.set_status(Status(StatusCode.ERROR, exc.reason))
                logger.warning(
                    "interaction %s failed status=%d reason=%s elapsed_ms=%.1f",
                    request_id, exc.status_code, exc.reason, _elapsed_ms(started),
                )
                return Outcome(exc.status_code)

        logger.info(
            "interaction %s handled status=%d elapsed_ms=%.1f",
            request_id, outcome.status_code, _elapsed_ms(started),
        )
        return outcome

    def _process(self, span: Span, headers: Mapping[str, str], body: bytes) -> Outcome:
        self._verify(headers, body)
        interaction = self._decode(body)

        if interaction.type == InteractionType.PING:
            return self._pong()
        if interaction.type != InteractionType.APPLICATION_COMMAND:
            raise InteractionError(400, "unsupported interaction type")
        if not interaction.id or not interaction.token:
            # Both address the reply callback.
            raise InteractionError(400, "invalid interaction payload")

        question = self._fetch_question(interaction.command_data())
        self._reply(interaction, question)
        span.set_attribute("leetcode.title_slug", question.slug)
        return Outcome(200)

    def _verify(self, headers: Mapping[str, str], body: bytes) -> None:
        if not self.verifier.verify_request(headers, body):
            raise InteractionError(400, "failed verifying interaction")

    def _decode(self, body: bytes) -> Interaction:
        try:
            return Interaction.model_validate_json(body)
        except ValidationError as exc:
            raise InteractionError(400, "invalid interaction payload") from exc

    def _pong(self) -> Outcome:
        try:
            body = InteractionResponse.pong().model_dump_json(exclude_none=True).encode()
        except ValueError as exc:
            raise InteractionError(500, "failed sending ping response") from exc
        return Outcome(200, body)

    def _fetch_question(self, command: ApplicationCommandData) -> QuestionReference:
        # Child span so the upstream call shows up under the interaction.
        with self.tracer.start_as_current_span("fetch_question") as span:
            difficulty = self.difficulty_for(command)
            span.set_attribute("leetcode.difficulty", difficulty.value)
            try:
                return self.question_client.random_question(difficulty)
            except LeetCodeError as exc:
                raise InteractionError(500, "failed to retrieve leetcode question") from exc

    def difficulty_for(self, command: ApplicationCommandData) -> Difficulty:
        opt = command.option(DIFFICULTY_OPTION)
        raw = opt.string_value().upper() if opt is not None else None
        return resolve_difficulty(raw, self.rng)

    def _reply(self, interaction: Interaction, question: QuestionReference) -> None:
        response = InteractionResponse.message(question.url)
        try:
            self.discord_client.respond(interaction, response)
        except DiscordError as exc:
            raise InteractionError(500, "failed responding to interaction") from exc


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
