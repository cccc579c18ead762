"""
ElevenLabs webhook signature verification.

Header format: ``t=<unix-seconds>,v0=<hex digest>`` (token order is free).
The digest is an HMAC-SHA256 of ``"<timestamp>.<raw body>"`` keyed with the
webhook secret. Verification only looks at bytes and the header, never at
parsed JSON.
"""
import hmac
import logging
import re
import time
from dataclasses import dataclass
from hashlib import sha256
from typing import Optional

from src.config import REPLAY_WINDOW_SECONDS
from src.exceptions import (
    InvalidSignatureError,
    MalformedSignatureError,
    MissingSignatureError,
    SignatureExpiredError,
)

logger = logging.getLogger(__name__)

_HEX_DIGEST = re.compile(r"[0-9a-fA-F]+")
_UNIX_SECONDS = re.compile(r"[1-9][0-9]*")


@dataclass(frozen=True)
class SignedRequest:
    """The raw body and signature header as captured from the request."""
    raw_body: bytes
    signature_header: Optional[str]


@dataclass(frozen=True)
class ParsedSignature:
    timestamp: int
    digest: str


def parse_signature_header(signature_header: Optional[str]) -> ParsedSignature:
    """
    Split the signature header into its timestamp and digest.

    Raises:
        MissingSignatureError: Header absent or blank
        MalformedSignatureError: No integer t= token or no hex v0= token
            (a t= of zero or with leading zeros is malformed, not expired)
    """
    if not signature_header or not signature_header.strip():
        raise MissingSignatureError()

    timestamp = None
    digest = None
    for part in signature_header.split(","):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            timestamp = value.strip()
        elif key == "v0":
            digest = value.strip()

    if not timestamp or not digest:
        raise MalformedSignatureError()

    # Plain ASCII digits only, so str(timestamp) reproduces the signed text
    if not _UNIX_SECONDS.fullmatch(timestamp) or not _HEX_DIGEST.fullmatch(digest):
        raise MalformedSignatureError()

    return ParsedSignature(timestamp=int(timestamp), digest=digest.lower())


def compute_signature(raw_body: bytes, timestamp: int, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"<timestamp>.<raw body>"``."""
    mac = hmac.new(
        key=secret.encode("utf-8"),
        msg=str(timestamp).encode("ascii") + b"." + raw_body,
        digestmod=sha256,
    )
    return mac.hexdigest()


def verify_signature(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: str,
    now: Optional[float] = None,
    max_future_skew_seconds: Optional[int] = None,
) -> ParsedSignature:
    """
    Verify an ElevenLabs webhook signature.

    Args:
        raw_body: Exact request body bytes
        signature_header: Value of the elevenlabs-signature header
        secret: Shared webhook secret
        now: Current unix time in seconds (defaults to time.time())
        max_future_skew_seconds: Reject timestamps further ahead than this; None disables the check

    Returns:
        The parsed signature, once it has been accepted

    Raises:
        MissingSignatureError, MalformedSignatureError, SignatureExpiredError, InvalidSignatureError
    """
    if not secret:
        # Settings validation guarantees a secret; never accept unsigned traffic
        raise InvalidSignatureError("Webhook secret not configured")

    parsed = parse_signature_header(signature_header)

    if now is None:
        now = time.time()

    if parsed.timestamp < now - REPLAY_WINDOW_SECONDS:
        logger.warning(f"Webhook timestamp too old: t={parsed.timestamp}")
        raise SignatureExpiredError()

    if max_future_skew_seconds is not None and parsed.timestamp > now + max_future_skew_seconds:
        logger.warning(f"Webhook timestamp too far in the future: t={parsed.timestamp}")
        raise SignatureExpiredError()

    expected = compute_signature(raw_body, parsed.timestamp, secret)
    if not hmac.compare_digest(expected.encode("ascii"), parsed.digest.encode("ascii")):
        logger.warning("HMAC signature mismatch")
        raise InvalidSignatureError()

    return parsed


def verify_signed_request(
    request: SignedRequest,
    secret: str,
    now: Optional[float] = None,
    max_future_skew_seconds: Optional[int] = None,
) -> ParsedSignature:
    """Verify a captured SignedRequest. See verify_signature."""
    return verify_signature(
        request.raw_body,
        request.signature_header,
        secret,
        now=now,
        max_future_skew_seconds=max_future_skew_seconds,
    )
