"""
Tests for transcript and email body formatting.
"""
from src.models import TranscriptTurn, WebhookEvent
from src.utils.text_utils import build_notification_body, format_call_duration, format_transcript

TURNS = [
    TranscriptTurn(role="agent", message="Hello, how can I help?"),
    TranscriptTurn(role="user", message="I'd like a callback."),
]


class TestFormatTranscript:

    def test_formats_turns_with_header(self):
        assert format_transcript(TURNS) == (
            "Conversation Transcript:\n"
            "\n"
            "AGENT: Hello, how can I help?\n"
            "\n"
            "USER: I'd like a callback."
        )

    def test_same_input_same_output(self):
        first = format_transcript(TURNS)
        second = format_transcript([TranscriptTurn(**t.model_dump()) for t in TURNS])
        assert first == second

    def test_preserves_turn_order(self):
        text = format_transcript(list(reversed(TURNS)))
        assert text.index("USER:") < text.index("AGENT:")

    def test_empty_transcript_placeholder(self):
        assert format_transcript([]) == "No transcript available."
        assert format_transcript(None) == "No transcript available."


class TestFormatCallDuration:

    def test_whole_seconds(self):
        assert format_call_duration(22) == "22 seconds"
        assert format_call_duration(22.0) == "22 seconds"

    def test_fractional_seconds(self):
        assert format_call_duration(22.25) == "22.2 seconds"

    def test_unknown(self):
        assert format_call_duration(None) == "N/A"


class TestBuildNotificationBody:

    def test_full_event(self):
        event = WebhookEvent(
            type="post_call_transcription",
            conversation_id="conv_1",
            transcript_turns=TURNS,
            transcript_summary="Caller wants a callback.",
            call_duration_seconds=41,
        )
        body = build_notification_body(event)

        assert "Conversation ID: conv_1" in body
        assert "Call duration: 41 seconds" in body
        assert "Summary:\nCaller wants a callback." in body
        assert body.rstrip().endswith("USER: I'd like a callback.")

    def test_defaults_for_missing_fields(self):
        event = WebhookEvent(type="post_call_transcription", conversation_id="conv_2")
        body = build_notification_body(event)

        assert "Call duration: N/A" in body
        assert "Summary:\nNo summary available." in body
        assert "No transcript available." in body
        assert "Conversation Transcript:" not in body
