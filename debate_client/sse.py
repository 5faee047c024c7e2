"""Incremental decoder for the turn event stream"""

import codecs
import json


class StreamProtocolError(Exception):
    """Raised when a data line is not valid JSON"""
    pass


class SSEDecoder:
    """Turns raw response bytes into event dicts

    Reads may end anywhere, even inside a multi-byte character or halfway
    through a line. Only complete lines are parsed; the remainder waits for
    the next ``feed``.
    """

    def __init__(self):
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""

    def feed(self, data: bytes) -> list[dict]:
        """Add bytes and return every event completed by them"""
        self._buffer += self._decoder.decode(data)
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return self._parse_lines(lines)

    def flush(self) -> list[dict]:
        """Parse whatever is left once the stream has ended"""
        self._buffer += self._decoder.decode(b"", final=True)
        lines, self._buffer = [self._buffer], ""
        return self._parse_lines(lines)

    def _parse_lines(self, lines: list[str]) -> list[dict]:
        events = []
        for line in lines:
            line = line.rstrip("\r")
            if not line.startswith("data:"):
                continue
            payload = line[5:]
            if payload.startswith(" "):
                payload = payload[1:]
            try:
                event = json.loads(payload)
            except json.JSONDecodeError as e:
                raise StreamProtocolError(f"Malformed event: {payload[:80]!r}") from e
            if isinstance(event, dict):
                events.append(event)
        return events
