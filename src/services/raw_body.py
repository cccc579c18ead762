"""
Raw request body access.

Signature verification runs over the exact bytes ElevenLabs sent, so the
body must never be decoded, re-serialized or trimmed before it is checked.
The hosting adapter picks one reader per request; the pipeline only ever
asks it for bytes.
"""
import logging
from typing import AsyncIterator

from src.exceptions import BodyReadError

logger = logging.getLogger(__name__)


class RawBodyReader:
    """Produces the unmodified request body."""

    async def read(self) -> bytes:
        raise NotImplementedError


class BufferedBodyReader(RawBodyReader):
    """Body already buffered by the surrounding framework."""

    def __init__(self, body: bytes):
        self._body = body

    async def read(self) -> bytes:
        return self._body


class StreamingBodyReader(RawBodyReader):
    """Body delivered as a chunk stream, concatenated as received."""

    def __init__(self, chunks: AsyncIterator[bytes]):
        self._chunks = chunks

    async def read(self) -> bytes:
        buffer = bytearray()
        try:
            async for chunk in self._chunks:
                if chunk:
                    buffer.extend(chunk)
        except Exception as e:
            logger.error(f"Request body stream failed after {len(buffer)} bytes: {e}")
            raise BodyReadError(details={"bytes_read": len(buffer)}) from e
        return bytes(buffer)
