import io
import struct

import pytest

from ggml_meta.formats.ggml.model import InvalidStringError, TruncatedError
from ggml_meta.formats.ggml.reader import ByteOrder, FieldReader, Versioning


def _reader(data: bytes, order: ByteOrder = ByteOrder.LE) -> FieldReader:
    return FieldReader(io.BytesIO(data), order)


def test_versioning_from_version():
    assert Versioning.from_version(1) is Versioning.V1
    assert Versioning.from_version(2) is Versioning.V2_PLUS
    assert Versioning.from_version(3) is Versioning.V2_PLUS
    assert Versioning.from_version(0) is Versioning.V2_PLUS


@pytest.mark.parametrize("order,prefix", [(ByteOrder.LE, "<"), (ByteOrder.BE, ">")])
def test_fixed_width_reads_follow_byte_order(order, prefix):
    data = (
        struct.pack(prefix + "H", 0xBEEF)
        + struct.pack(prefix + "i", -7)
        + struct.pack(prefix + "Q", 2**40 + 3)
        + struct.pack(prefix + "d", 1.5)
    )
    r = _reader(data, order)
    assert r.read_u16() == 0xBEEF
    assert r.read_i32() == -7
    assert r.read_u64() == 2**40 + 3
    assert r.read_f64() == 1.5
    assert r.bytes_read == len(data)


def test_bool_is_single_byte_nonzero():
    r = _reader(b"\x00\x01\x02")
    assert r.read_bool() is False
    assert r.read_bool() is True
    assert r.read_bool() is True


def test_v1_string_strips_terminator():
    raw = struct.pack("<I", 6) + b"llama\x00"
    r = _reader(raw)
    assert r.read_string(Versioning.V1) == "llama"
    assert r.bytes_read == 10


def test_v1_zero_length_string_is_empty():
    assert _reader(struct.pack("<I", 0)).read_string(Versioning.V1) == ""


def test_v2_string_has_no_terminator():
    raw = struct.pack("<Q", 5) + b"llama" + b"\xff"
    r = _reader(raw)
    assert r.read_string(Versioning.V2_PLUS) == "llama"
    assert r.bytes_read == 13


def test_count_width_depends_on_versioning():
    r = _reader(struct.pack("<I", 7) + struct.pack("<Q", 9))
    assert r.read_count(Versioning.V1) == 7
    assert r.read_count(Versioning.V2_PLUS) == 9


def test_short_read_raises_truncated():
    r = _reader(b"\x01\x02")
    with pytest.raises(TruncatedError) as exc:
        r.read_u32()
    assert exc.value.expected == 4
    assert exc.value.actual == 2


def test_string_longer_than_stream_raises_truncated():
    r = _reader(struct.pack("<Q", 2**62) + b"abc")
    with pytest.raises(TruncatedError):
        r.read_string(Versioning.V2_PLUS)


@pytest.mark.parametrize("versioning,prefix", [(Versioning.V1, "<I"), (Versioning.V2_PLUS, "<Q")])
def test_invalid_utf8_string_raises(versioning, prefix):
    raw = b"k\xff\xfe"
    if versioning is Versioning.V1:
        raw += b"\x00"
    r = _reader(struct.pack(prefix, len(raw)) + raw)
    with pytest.raises(InvalidStringError) as exc:
        r.read_string(versioning)
    assert exc.value.raw == b"k\xff\xfe"
