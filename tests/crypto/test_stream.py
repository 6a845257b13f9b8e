from __future__ import annotations

import io
import random

import pytest
from Crypto.Cipher import ARC4 as RefARC4

from arc4kit.crypto import AlreadyReleased, ARC4Stream, InvalidArgument, SBlock

_rng = random.Random(20251123)


def randbytes(n: int) -> bytes:
    return bytes(_rng.randrange(0, 256) for _ in range(n))


class ShortWriter(io.RawIOBase):
    """Raw sink that accepts at most 3 bytes per write call."""

    def __init__(self):
        self.data = bytearray()

    def writable(self):
        return True

    def write(self, b):
        chunk = bytes(b[:3])
        self.data += chunk
        return len(chunk)


def test_write_enciphers():
    key = randbytes(16)
    data = randbytes(200)
    sink = io.BytesIO()

    with ARC4Stream(sink, key, leave_open=True) as s:
        assert s.write(data[:50]) == 50
        assert s.write(data[50:]) == 150

    assert sink.getvalue() == RefARC4.new(key).encrypt(data)


def test_write_does_not_mutate_caller_buffer():
    buf = bytearray(b"plaintext")
    with ARC4Stream(io.BytesIO(), b"key") as s:
        s.write(buf)
    assert buf == b"plaintext"


def test_read_deciphers():
    key = randbytes(16)
    data = randbytes(300)
    source = io.BytesIO(RefARC4.new(key).encrypt(data))

    with ARC4Stream(source, key) as s:
        assert s.read(10) + s.read() == data


def test_read_past_end_ciphers_only_bytes_read():
    key = randbytes(16)
    data = randbytes(10)
    s = ARC4Stream(io.BytesIO(RefARC4.new(key).encrypt(data)), key)

    buf = bytearray(64)
    n = s.readinto(buf)

    assert n == 10
    assert buf[:10] == data
    assert buf[10:] == bytes(54)
    assert s.read(5) == b""


def test_roundtrip_with_password_and_salt_sblock():
    start = SBlock.from_salt(b"file-salt")
    data = randbytes(1000)
    sink = io.BytesIO()

    with ARC4Stream(sink, "hunter2", start, leave_open=True) as s:
        s.write(data)
    sink.seek(0)
    with ARC4Stream(sink, "hunter2", start) as s:
        assert s.read() == data


def test_short_writes_are_completed():
    key = randbytes(8)
    data = randbytes(20)
    sink = ShortWriter()
    with ARC4Stream(sink, key, leave_open=True) as s:
        assert s.write(data) == 20
    assert bytes(sink.data) == RefARC4.new(key).encrypt(data)


class StalledWriter(io.RawIOBase):
    """Raw sink that takes ``accept`` bytes once, then reports ``stalled``."""

    def __init__(self, stalled, accept=0):
        self.data = bytearray()
        self.stalled = stalled
        self.accept = accept

    def writable(self):
        return True

    def write(self, b):
        if self.accept:
            chunk = bytes(b[: self.accept])
            self.accept = 0
            self.data += chunk
            return len(chunk)
        return self.stalled


@pytest.mark.parametrize("stalled", [None, 0])
def test_write_to_stalled_sink_raises(stalled):
    sink = StalledWriter(stalled)
    with ARC4Stream(sink, randbytes(8), leave_open=True) as s:
        with pytest.raises(BlockingIOError) as exc_info:
            s.write(randbytes(10))
    assert exc_info.value.characters_written == 0
    assert sink.data == b""


def test_write_stalling_after_partial_write_reports_progress():
    key = randbytes(8)
    data = randbytes(10)
    sink = StalledWriter(None, accept=3)
    with ARC4Stream(sink, key, leave_open=True) as s:
        with pytest.raises(BlockingIOError) as exc_info:
            s.write(data)
    assert exc_info.value.characters_written == 3
    assert bytes(sink.data) == RefARC4.new(key).encrypt(data)[:3]


def test_capabilities_are_passed_through():
    raw = io.BytesIO(b"abc")
    s = ARC4Stream(raw, b"key")
    assert s.readable() and s.writable() and s.seekable()

    class ReadOnly(io.RawIOBase):
        def readable(self):
            return True

        def readinto(self, b):
            return 0

    ro = ARC4Stream(ReadOnly(), b"key")
    assert ro.readable()
    assert not ro.writable()
    assert not ro.seekable()
    with pytest.raises(io.UnsupportedOperation):
        ro.write(b"x")


def test_not_readable_raises():
    s = ARC4Stream(ShortWriter(), b"key")
    with pytest.raises(io.UnsupportedOperation):
        s.readinto(bytearray(4))


def test_seek_tell_truncate_flush_delegate():
    raw = io.BytesIO(b"0123456789")
    s = ARC4Stream(raw, b"key")

    assert s.seek(4) == 4
    assert raw.tell() == 4
    assert s.tell() == 4
    assert s.seek(-2, io.SEEK_END) == 8
    assert s.truncate(6) == 6
    assert len(raw.getvalue()) == 6
    s.flush()


def test_seek_does_not_rewind_keystream():
    key = randbytes(8)
    data = randbytes(16)
    raw = io.BytesIO(RefARC4.new(key).encrypt(data))

    s = ARC4Stream(raw, key)
    s.read(8)
    s.seek(0)
    assert s.read(8) != data[:8]


def test_close_releases_engine_and_closes_raw():
    raw = io.BytesIO()
    s = ARC4Stream(raw, b"key")
    engine = s._engine
    s.close()
    s.close()

    assert engine.released
    assert raw.closed
    assert s.closed


def test_leave_open():
    raw = io.BytesIO()
    with ARC4Stream(raw, b"key", leave_open=True):
        pass
    assert not raw.closed


@pytest.mark.parametrize(
    "op",
    [
        lambda s: s.read(1),
        lambda s: s.readinto(bytearray(1)),
        lambda s: s.write(b"x"),
        lambda s: s.seek(0),
        lambda s: s.tell(),
        lambda s: s.size(),
        lambda s: s.flush(),
        lambda s: s.truncate(0),
        lambda s: s.readable(),
        lambda s: s.writable(),
        lambda s: s.seekable(),
        lambda s: s.state,
    ],
)
def test_use_after_close(op):
    s = ARC4Stream(io.BytesIO(b"data"), b"key", leave_open=True)
    s.close()
    with pytest.raises(AlreadyReleased):
        op(s)


def test_invalid_construction():
    with pytest.raises(InvalidArgument):
        ARC4Stream(None, b"key")
    with pytest.raises(InvalidArgument):
        ARC4Stream(io.BytesIO(), b"")
    with pytest.raises(InvalidArgument):
        ARC4Stream(io.BytesIO(), "")
    with pytest.raises(InvalidArgument):
        ARC4Stream(io.BytesIO(), b"key", bytes(256))


def test_failed_construction_leaves_raw_open():
    raw = io.BytesIO()
    with pytest.raises(InvalidArgument):
        ARC4Stream(raw, b"")
    assert not raw.closed


def test_state_snapshot():
    s = ARC4Stream(io.BytesIO(), b"key")
    assert SBlock.is_valid_permutation(s.state.to_bytes())


def test_size_reports_raw_length_and_keeps_position():
    raw = io.BytesIO(b"0123456789")
    s = ARC4Stream(raw, b"key")
    s.seek(4)

    assert s.size() == 10
    assert s.tell() == 4


def test_size_requires_seekable_raw():
    s = ARC4Stream(ShortWriter(), b"key")
    with pytest.raises(io.UnsupportedOperation):
        s.size()
