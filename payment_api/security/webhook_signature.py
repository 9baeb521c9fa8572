"""
Webhook Signature Verifier

Verifies the HMAC-SHA256 signature the payment provider attaches to webhook
notifications. The signed message is the x-webhook-timestamp header value
followed by the raw request body; the signature is base64 encoded.
"""

import base64
import binascii
import logging
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-webhook-signature"
TIMESTAMP_HEADER = "x-webhook-timestamp"


@dataclass
class SignatureCheck:
    """Result of webhook signature verification"""
    is_valid: bool
    error_message: Optional[str] = None
    timestamp: Optional[int] = None


class WebhookSignatureVerifier:
    """
    Verifies provider webhook signatures.

    Usage:
        verifier = WebhookSignatureVerifier(secret="...")
        result = verifier.verify(headers=request.headers, body=raw_body)
        if result.is_valid:
            ...
    """

    def __init__(self, secret: str, max_age_seconds: int = 300, max_clock_skew_seconds: int = 60):
        """
        Initialize the verifier.

        Args:
            secret: Shared signing secret
            max_age_seconds: Maximum age of notifications to accept
            max_clock_skew_seconds: Tolerance for timestamps in the future
        """
        self._secret = secret.encode()
        self.max_age = max_age_seconds
        self.max_clock_skew = max_clock_skew_seconds

    def compute_signature(self, timestamp: str, body: bytes) -> str:
        """Signature the provider would send for this timestamp and body"""
        h = hmac.HMAC(self._secret, hashes.SHA256())
        h.update(timestamp.encode() + body)
        return base64.b64encode(h.finalize()).decode()

    def verify(self, headers: Mapping[str, str], body: bytes, now: Optional[float] = None) -> SignatureCheck:
        """
        Verify a webhook notification.

        Args:
            headers: Request headers
            body: Raw request body, exactly as received
            now: Current time in seconds (defaults to time.time())

        Returns:
            SignatureCheck indicating success/failure
        """
        headers_lower = {k.lower(): v for k, v in headers.items()}
        signature = headers_lower.get(SIGNATURE_HEADER)
        timestamp = headers_lower.get(TIMESTAMP_HEADER)

        if not signature or not timestamp:
            return SignatureCheck(is_valid=False, error_message="Missing webhook signature headers")

        try:
            timestamp_ms = int(timestamp)
        except ValueError:
            return SignatureCheck(is_valid=False, error_message="Malformed webhook timestamp")

        current = now if now is not None else time.time()
        age = current - timestamp_ms / 1000
        if age > self.max_age:
            return SignatureCheck(
                is_valid=False,
                error_message=f"Webhook too old ({int(age)}s)",
                timestamp=timestamp_ms,
            )
        if age < -self.max_clock_skew:
            return SignatureCheck(
                is_valid=False,
                error_message="Webhook timestamp is in the future",
                timestamp=timestamp_ms,
            )

        try:
            provided = base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError):
            return SignatureCheck(is_valid=False, error_message="Malformed webhook signature")

        h = hmac.HMAC(self._secret, hashes.SHA256())
        h.update(timestamp.encode() + body)
        try:
            h.verify(provided)
        except InvalidSignature:
            return SignatureCheck(
                is_valid=False,
                error_message="Signature mismatch",
                timestamp=timestamp_ms,
            )

        return SignatureCheck(is_valid=True, timestamp=timestamp_ms)
