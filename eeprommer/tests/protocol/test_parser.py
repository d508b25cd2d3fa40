from __future__ import annotations

import pytest

from eeprommer.protocol.core import messages
from eeprommer.protocol.core.frames import AckFrame, DataFrame, ExpectKind
from eeprommer.protocol.core.parser import FrameParser


def _drain(parser: FrameParser) -> list:
    out = []
    while True:
        f = parser.get_frame()
        if f is None:
            return out
        out.append(f)


def test_get_frame_returns_none_on_empty_buffer():
    assert FrameParser().get_frame() is None


def test_length_byte_and_payload_in_separate_reads():
    parser = FrameParser()

    parser.feed(b"\x03")
    assert parser.get_frame() is None

    parser.feed(b"\xAA\xBB")
    assert parser.get_frame() is None

    parser.feed(b"\xCC")
    assert parser.get_frame() == DataFrame(b"\xAA\xBB\xCC")
    assert bytes(parser.buffer) == b""


def test_two_frames_in_one_read_are_split_in_order():
    parser = FrameParser()
    parser.feed(b"\x01\x42\x02\x10\x20")

    assert _drain(parser) == [DataFrame(b"\x42"), DataFrame(b"\x10\x20")]


def test_zero_length_frame_is_ack_only():
    parser = FrameParser()
    parser.feed(b"\x00")

    frame = parser.get_frame()
    assert isinstance(frame, AckFrame)
    assert frame.kind == ExpectKind.ACK
    assert parser.get_frame() is None


def test_mixed_ack_and_data_with_trailing_partial():
    parser = FrameParser()
    parser.feed(b"\x00\x01\x7f\x00\x04\x01\x02")

    assert _drain(parser) == [AckFrame(), DataFrame(b"\x7f"), AckFrame()]
    assert bytes(parser.buffer) == b"\x04\x01\x02"


def test_flush_returns_leftover_as_data_and_clears():
    parser = FrameParser()
    parser.feed(b"\x04\x01\x02")
    assert parser.get_frame() is None

    assert parser.flush() == DataFrame(b"\x04\x01\x02")
    assert parser.flush() is None
    assert bytes(parser.buffer) == b""


def test_load_frames_reassemble_source_through_parser():
    data = bytes((i * 7) & 0xFF for i in range(1000))
    parser = FrameParser()
    for raw in messages.load(data):
        # byte-at-a-time to exercise partial frames
        for b in raw:
            parser.feed(bytes([b]))

    frames = _drain(parser)
    header, chunks = frames[0], frames[1:]
    assert header.payload == bytes([0x6C, 0x03, 0xE8])
    assert b"".join(f.payload for f in chunks) == data


def test_data_frame_rejects_empty_payload():
    with pytest.raises(ValueError):
        DataFrame(b"")


def test_frames_encode_to_wire():
    assert AckFrame().encode() == b"\x00"
    assert DataFrame(b"\x01\x02").encode() == b"\x02\x01\x02"
