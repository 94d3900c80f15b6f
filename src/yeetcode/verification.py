"""Ed25519 verification of inbound Discord interactions.

Discord signs `timestamp + body` and sends the result in the
`X-Signature-Ed25519` header alongside `X-Signature-Timestamp`.
"""
import logging
from typing import Mapping, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


class InteractionVerifier:
    """Verifies interaction signatures against the application's public key."""

    def __init__(self, public_key: bytes):
        # ValueError for anything that is not a 32-byte key
        self._key = Ed25519PublicKey.from_public_bytes(public_key)

    def verify(self, signature_hex: Optional[str], timestamp: Optional[str], body: bytes) -> bool:
        if not signature_hex or not timestamp:
            return False
        try:
            signature = bytes.fromhex(signature_hex)
        except ValueError:
            logger.debug("signature header is not hex")
            return False
        if len(signature) != 64:
            return False
        try:
            self._key.verify(signature, timestamp.encode() + body)
        except InvalidSignature:
            return False
        return True

    def verify_request(self, headers: Mapping[str, str], body: bytes) -> bool:
        """Verify using the signature headers of an inbound request."""
        return self.verify(headers.get(SIGNATURE_HEADER), headers.get(TIMESTAMP_HEADER), body)
