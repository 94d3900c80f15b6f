# =============================================================================
# CONFTEST - shared fixtures
# =============================================================================
# Signing keys, mocked upstream clients and an in-memory span exporter so the
# interaction pipeline can be exercised without Discord, LeetCode or Axiom.
# =============================================================================

import asyncio
import json
import os
import time
from typing import Any, Callable, Dict, Optional, Tuple
from unittest.mock import MagicMock

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from yeetcode.configuration import Settings
from yeetcode.telemetry import Telemetry
from yeetcode.tools.discord import DiscordClient
from yeetcode.tools.leetcode import LeetCodeClient, QuestionReference
from yeetcode.verification import InteractionVerifier


# =============================================================================
# KEYS AND SIGNING
# =============================================================================


@pytest.fixture
def private_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


@pytest.fixture
def public_key_hex(private_key) -> str:
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw).hex()


@pytest.fixture
def verifier(settings) -> InteractionVerifier:
    return InteractionVerifier(settings.discord_public_key)


@pytest.fixture
def sign(private_key) -> Callable[..., Tuple[bytes, Dict[str, str]]]:
    """Return a helper that encodes a payload and signs it like Discord does."""

    def _sign(payload: Any, timestamp: Optional[str] = None) -> Tuple[bytes, Dict[str, str]]:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        ts = timestamp or str(int(time.time()))
        signature = private_key.sign(ts.encode() + body).hex()
        headers = {
            "Content-Type": "application/json",
            "X-Signature-Ed25519": signature,
            "X-Signature-Timestamp": ts,
        }
        return body, headers

    return _sign


# =============================================================================
# SETTINGS
# =============================================================================


@pytest.fixture
def settings(public_key_hex) -> Settings:
    return Settings(discord_token="test-token", discord_public_key=public_key_hex)


# =============================================================================
# UPSTREAM MOCKS
# =============================================================================


@pytest.fixture
def question_client():
    mock = MagicMock(spec=LeetCodeClient)
    mock.random_question.return_value = QuestionReference(slug="two-sum")
    return mock


@pytest.fixture
def discord_client():
    return MagicMock(spec=DiscordClient)


# =============================================================================
# TELEMETRY
# =============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def telemetry(span_exporter) -> Telemetry:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield Telemetry.from_provider(provider)
    provider.shutdown()


# =============================================================================
# INTERACTION PAYLOADS
# =============================================================================


def ping_interaction() -> Dict[str, Any]:
    return {"id": "ping-001", "application_id": "app-1", "type": 1, "token": "tok-ping", "version": 1}


def command_interaction(difficulty: Optional[str] = None, interaction_id: str = "interaction-001") -> Dict[str, Any]:
    options = []
    if difficulty is not None:
        options.append({"name": "difficulty", "type": 3, "value": difficulty})
    return {
        "id": interaction_id,
        "application_id": "app-1",
        "type": 2,
        "token": "tok-command",
        "guild_id": "guild-456",
        "channel_id": "channel-789",
        "member": {"user": {"id": "user-123", "username": "testuser"}},
        "data": {"id": "cmd-1", "name": "yeetcode", "type": 1, "options": options},
        "version": 1,
    }


@pytest.fixture
def make_ping():
    return ping_interaction


@pytest.fixture
def make_command():
    return command_interaction


# =============================================================================
# LISTENER FAKE
# =============================================================================


class FakeServer:
    """Stands in for the uvicorn server: honours should_exit and force_exit."""

    def __init__(self, fail=None, stop_on_own=False, hang_on_shutdown=False, drain=0.0, signal_on_start=None):
        self.should_exit = False
        self.force_exit = False
        self.fail = fail
        self.stop_on_own = stop_on_own
        self.hang_on_shutdown = hang_on_shutdown
        self.drain = drain
        self.signal_on_start = signal_on_start
        self.finished = False

    async def serve(self):
        if self.signal_on_start is not None:
            os.kill(os.getpid(), self.signal_on_start)
        if self.fail is not None:
            raise self.fail
        if self.stop_on_own:
            return
        while not self.should_exit:
            await asyncio.sleep(0.01)
        if self.hang_on_shutdown:
            # An in-flight request that never finishes.
            await asyncio.Event().wait()
        await asyncio.sleep(self.drain)
        self.finished = True


@pytest.fixture
def make_server():
    return FakeServer
