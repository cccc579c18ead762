"""
Utility modules for shared functionality.
"""
from .text_utils import (
    format_transcript,
    format_call_duration,
    build_notification_body,
)

__all__ = [
    "format_transcript",
    "format_call_duration",
    "build_notification_body",
]
