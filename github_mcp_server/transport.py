"""
MCP Transport layer.

StdioTransport frames messages as one JSON value per line on
stdin/stdout. Decoding is left to the server so that a malformed line
can be answered instead of ending the session.
"""

import sys
import json
from abc import ABC, abstractmethod
from typing import Optional


class Transport(ABC):
    """Abstract base class for MCP transports."""

    @abstractmethod
    async def send(self, message: dict) -> None:
        """Send a message."""
        pass

    @abstractmethod
    async def receive(self) -> Optional[str]:
        """Receive one raw message. Returns None on EOF/close."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the transport."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class StdioTransport(Transport):
    """
    Transport using stdin/stdout for communication.

    Each message occupies exactly one line. The default input is the raw
    stdin buffer; bytes that are not valid UTF-8 become U+FFFD.
    """

    def __init__(
        self,
        input_stream=None,
        output_stream=None,
    ):
        self.input = input_stream or getattr(sys.stdin, "buffer", sys.stdin)
        self.output = output_stream or sys.stdout
        self._closed = False

    async def send(self, message: dict) -> None:
        """Write a message as a single line and flush."""
        if self._closed:
            raise RuntimeError("Transport is closed")

        # json.dumps escapes control characters, so the line never splits
        content = json.dumps(message)

        try:
            self.output.write(content + "\n")
            self.output.flush()
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Failed to send: {e}")

    async def receive(self) -> Optional[str]:
        """Read the next line without its terminator."""
        if self._closed:
            return None

        line = self.input.readline()
        if not line:
            return None  # EOF

        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")

        return line.rstrip("\r\n")

    async def close(self) -> None:
        """Close the transport."""
        self._closed = True
