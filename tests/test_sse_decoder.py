"""Tests for the incremental event stream decoder."""

import random

import pytest

from debate_client import SSEDecoder, StreamProtocolError
from debate_core import encode_sse

EVENTS = [
    {"type": "chunk", "content": "まず、"},
    {"type": "chunk", "content": "データを見てよ。\n改行も入る"},
    {"type": "chunk", "content": "😀 emoji"},
    {"type": "done", "turnNumber": 3, "persona": "C", "isLastTurn": False},
]
STREAM = "".join(encode_sse(e) for e in EVENTS).encode("utf-8")


def decode_in_pieces(data: bytes, cuts: list[int]) -> list[dict]:
    decoder = SSEDecoder()
    events = []
    start = 0
    for cut in sorted(cuts) + [len(data)]:
        events.extend(decoder.feed(data[start:cut]))
        start = cut
    return events + decoder.flush()


def test_whole_stream_decodes() -> None:
    assert decode_in_pieces(STREAM, []) == EVENTS


def test_byte_at_a_time() -> None:
    assert decode_in_pieces(STREAM, list(range(1, len(STREAM)))) == EVENTS


@pytest.mark.parametrize("seed", range(20))
def test_random_split_points_give_same_events(seed: int) -> None:
    rng = random.Random(seed)
    cuts = rng.sample(range(1, len(STREAM)), k=rng.randint(1, 30))
    assert decode_in_pieces(STREAM, cuts) == EVENTS


def test_split_inside_multibyte_character() -> None:
    data = encode_sse({"type": "chunk", "content": "あ"}).encode("utf-8")
    middle = data.index("あ".encode("utf-8")) + 1
    decoder = SSEDecoder()

    assert decoder.feed(data[:middle]) == []
    assert decoder.feed(data[middle:]) == [{"type": "chunk", "content": "あ"}]


def test_incomplete_line_waits_for_more_data() -> None:
    decoder = SSEDecoder()
    assert decoder.feed(b'data: {"type": "chu') == []
    assert decoder.feed(b'nk", "content": "x"}\n\n') == [{"type": "chunk", "content": "x"}]


def test_final_line_without_newline_is_flushed() -> None:
    decoder = SSEDecoder()
    assert decoder.feed(b'data: {"type": "done", "turnNumber": 1, "persona": "A", "isLastTurn": true}') == []
    assert decoder.flush()[0]["type"] == "done"


def test_crlf_and_comments_are_tolerated() -> None:
    decoder = SSEDecoder()
    events = decoder.feed(b': keep-alive\r\n\r\ndata:{"type": "chunk", "content": "y"}\r\n\r\n')
    assert events == [{"type": "chunk", "content": "y"}]


def test_malformed_json_raises() -> None:
    decoder = SSEDecoder()
    with pytest.raises(StreamProtocolError):
        decoder.feed(b"data: {not json}\n\n")
