"""
Tests for ElevenLabs webhook signature verification.

Run with: pytest tests/test_signature.py -v
"""
import pytest

from conftest import WEBHOOK_SECRET, encode, make_payload, sign
from src.config import REPLAY_WINDOW_SECONDS
from src.exceptions import (
    InvalidSignatureError,
    MalformedSignatureError,
    MissingSignatureError,
    SignatureExpiredError,
)
from src.services.signature import (
    SignedRequest,
    compute_signature,
    parse_signature_header,
    verify_signature,
    verify_signed_request,
)

BODY = encode(make_payload())


class TestParseSignatureHeader:

    def test_parses_timestamp_and_digest(self):
        parsed = parse_signature_header("t=1739537297,v0=ABCdef0123")
        assert parsed.timestamp == 1739537297
        assert parsed.digest == "abcdef0123"

    def test_token_order_is_not_significant(self):
        parsed = parse_signature_header("v0=abc123, t=1739537297")
        assert parsed.timestamp == 1739537297
        assert parsed.digest == "abc123"

    @pytest.mark.parametrize("header", [None, "", "   "])
    def test_missing_header(self, header):
        with pytest.raises(MissingSignatureError):
            parse_signature_header(header)

    @pytest.mark.parametrize("header", [
        "v0=abc123",                 # no timestamp
        "t=1739537297",              # no digest
        "t=,v0=abc123",              # empty timestamp
        "t=1739537297,v0=",          # empty digest
        "t=soon,v0=abc123",          # non-numeric timestamp
        "t=-5,v0=abc123",            # signed timestamp
        "t=1739537297,v0=xyz",       # non-hex digest
        "t=1739537297,v1=abc123",    # wrong scheme
        "garbage",
        "t=0,v0=abc123",             # zero timestamp
        "t=01739537297,v0=abc123",   # zero-padded timestamp
    ])
    def test_malformed_header(self, header):
        with pytest.raises(MalformedSignatureError):
            parse_signature_header(header)


class TestVerifySignature:

    def test_valid_signature(self, now):
        parsed = verify_signature(BODY, sign(BODY, now), WEBHOOK_SECRET, now=now)
        assert parsed.timestamp == now

    def test_signed_request(self, now):
        request = SignedRequest(raw_body=BODY, signature_header=sign(BODY, now))
        assert verify_signed_request(request, WEBHOOK_SECRET, now=now).timestamp == now

    def test_digest_is_hmac_of_timestamp_dot_body(self):
        header = sign(b"{}", 1700000000, secret="secret")
        assert header == f"t=1700000000,v0={compute_signature(b'{}', 1700000000, 'secret')}"

    @pytest.mark.parametrize("position", [0, 1, len(BODY) // 2, len(BODY) - 1])
    def test_single_byte_mutation_is_rejected(self, now, position):
        header = sign(BODY, now)
        mutated = bytearray(BODY)
        mutated[position] ^= 0x01
        with pytest.raises(InvalidSignatureError):
            verify_signature(bytes(mutated), header, WEBHOOK_SECRET, now=now)

    def test_reserialized_body_is_rejected(self, now):
        header = sign(BODY, now)
        reformatted = BODY.replace(b", ", b",")
        assert reformatted != BODY
        with pytest.raises(InvalidSignatureError):
            verify_signature(reformatted, header, WEBHOOK_SECRET, now=now)

    def test_wrong_secret_is_rejected(self, now):
        with pytest.raises(InvalidSignatureError):
            verify_signature(BODY, sign(BODY, now, secret="other"), WEBHOOK_SECRET, now=now)

    def test_timestamp_is_part_of_the_signed_text(self, now):
        digest = sign(BODY, now).split("v0=")[1]
        with pytest.raises(InvalidSignatureError):
            verify_signature(BODY, f"t={now - 1},v0={digest}", WEBHOOK_SECRET, now=now)

    def test_uppercase_digest_is_accepted(self, now):
        digest = compute_signature(BODY, now, WEBHOOK_SECRET).upper()
        verify_signature(BODY, f"t={now},v0={digest}", WEBHOOK_SECRET, now=now)

    @pytest.mark.parametrize("age", [REPLAY_WINDOW_SECONDS + 1, REPLAY_WINDOW_SECONDS * 10])
    def test_expired_even_with_correct_digest(self, now, age):
        timestamp = now - age
        with pytest.raises(SignatureExpiredError):
            verify_signature(BODY, sign(BODY, timestamp), WEBHOOK_SECRET, now=now)

    def test_expired_is_checked_before_digest(self, now):
        timestamp = now - REPLAY_WINDOW_SECONDS - 60
        with pytest.raises(SignatureExpiredError):
            verify_signature(BODY, f"t={timestamp},v0={'0' * 64}", WEBHOOK_SECRET, now=now)

    def test_timestamp_at_window_edge_is_accepted(self, now):
        timestamp = now - REPLAY_WINDOW_SECONDS
        verify_signature(BODY, sign(BODY, timestamp), WEBHOOK_SECRET, now=now)

    def test_future_timestamp_accepted_without_skew_bound(self, now):
        timestamp = now + 24 * 3600
        verify_signature(BODY, sign(BODY, timestamp), WEBHOOK_SECRET, now=now)

    def test_future_timestamp_rejected_with_skew_bound(self, now):
        timestamp = now + 600
        with pytest.raises(SignatureExpiredError):
            verify_signature(
                BODY, sign(BODY, timestamp), WEBHOOK_SECRET, now=now, max_future_skew_seconds=300
            )

    def test_malformed_regardless_of_body(self, now):
        for body in (b"", BODY, b"\xff\xfe"):
            with pytest.raises(MalformedSignatureError):
                verify_signature(body, f"t={now}", WEBHOOK_SECRET, now=now)

    def test_non_utf8_body_can_be_verified(self, now):
        body = b"\xff\xfe\x00binary"
        verify_signature(body, sign(body, now), WEBHOOK_SECRET, now=now)

    def test_empty_secret_never_verifies(self, now):
        with pytest.raises(InvalidSignatureError):
            verify_signature(BODY, sign(BODY, now, secret=""), "", now=now)
