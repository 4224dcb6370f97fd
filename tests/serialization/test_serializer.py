# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import pytest
from typing_extensions import override

from bytewire.serialization import Serializable, Serializer
from bytewire.serialization.adapters import MaxBytesExceededError
from bytewire.serialization.bytes_serializer import BytesSerializer
from bytewire.serialization.types import Buffer


class Point(Serializable):
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    @override
    def write_into(self, serializer: Serializer) -> None:
        serializer.write_vint64(self.x)
        serializer.write_u16(self.y)


class Segment(Serializable):
    def __init__(self, start: Point, end: Point, closed: bool) -> None:
        self.start = start
        self.end = end
        self.closed = closed

    @override
    def write_into(self, serializer: Serializer) -> None:
        serializer.write(self.start)
        serializer.write(self.end)
        serializer.write_bool(self.closed)


class ByteOnlySerializer(Serializer):
    """Sink that only knows how to append one byte at a time."""

    def __init__(self) -> None:
        self.data = bytearray()

    @override
    def cur_pos(self) -> int:
        return len(self.data)

    @override
    def write_byte(self, data: int) -> None:
        self.data.append(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        super().write_bytes(data)


def _written(fn, *args) -> bytes:
    se = Serializer.build_bytes_serializer()
    fn(se, *args)
    return bytes(se.finalize())


def test_build_bytes_serializer():
    assert isinstance(Serializer.build_bytes_serializer(), BytesSerializer)


def test_write_bool():
    assert _written(Serializer.write_bool, True) == b'\x01'
    assert _written(Serializer.write_bool, False) == b'\x00'


def test_write_bool_rejects_non_bool():
    se = Serializer.build_bytes_serializer()
    with pytest.raises(AssertionError):
        se.write_bool(1)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ['method', 'value', 'expected'],
    [
        (Serializer.write_u16, 0x1234, bytes([0x34, 0x12])),
        (Serializer.write_u16, 0, bytes([0x00, 0x00])),
        (Serializer.write_u16, 0xFFFF, bytes([0xFF, 0xFF])),
        (Serializer.write_u32, 0x12345678, bytes([0x78, 0x56, 0x34, 0x12])),
        (Serializer.write_u32, 1, bytes([0x01, 0x00, 0x00, 0x00])),
        (Serializer.write_u64, 0x0102030405060708, bytes([0x08, 0x07, 0x06, 0x05, 0x04, 0x03, 0x02, 0x01])),
        (Serializer.write_u64, 2**64 - 1, bytes([0xFF]) * 8),
    ]
)
def test_write_fixed_width(method, value, expected):
    assert _written(method, value) == expected


@pytest.mark.parametrize(
    ['method', 'value'],
    [
        (Serializer.write_u16, 0x10000),
        (Serializer.write_u16, -1),
        (Serializer.write_u32, 2**32),
        (Serializer.write_u64, 2**64),
        (Serializer.write_u64, -1),
    ]
)
def test_write_fixed_width_out_of_range(method, value):
    se = Serializer.build_bytes_serializer()
    with pytest.raises(ValueError):
        method(se, value)
    assert se.cur_pos() == 0


def test_write_vint64():
    assert _written(Serializer.write_vint64, 0) == b'\x01'
    assert _written(Serializer.write_vint64, 128) == b'\x02\x02'


def test_write_byte_range():
    se = Serializer.build_bytes_serializer()
    se.write_byte(0)
    se.write_byte(255)
    with pytest.raises(OverflowError):
        se.write_byte(256)
    with pytest.raises(OverflowError):
        se.write_byte(-1)
    assert bytes(se.finalize()) == b'\x00\xff'


def test_generic_write_delegates():
    assert _written(Serializer.write, Point(1, 0x1234)) == bytes.fromhex('033412')


def test_generic_write_passes_serializer_through():
    received = []

    class Recorder(Serializable):
        def write_into(self, serializer: Serializer) -> None:
            received.append(serializer)

    se = Serializer.build_bytes_serializer()
    se.write(Recorder())
    assert received == [se]
    assert se.cur_pos() == 0


def test_nested_serializable():
    segment = Segment(Point(0, 1), Point(128, 2), True)
    assert _written(Serializer.write, segment) == bytes.fromhex('01 0100 0202 0200 01')


def test_write_many():
    points = [Point(0, 1), Point(1, 2), Point(127, 3)]
    assert _written(Serializer.write_many, points) == bytes.fromhex('01 0100 03 0200 ff 0300')
    assert _written(Serializer.write_many, []) == b''


def test_to_bytes():
    assert Point(1, 0x1234).to_bytes() == bytes.fromhex('033412')


def test_write_struct():
    assert _written(Serializer.write_struct, (1, 2), '<HB') == b'\x01\x00\x02'


def test_cur_pos_tracks_writes():
    se = Serializer.build_bytes_serializer()
    assert se.cur_pos() == 0
    se.write_bool(True)
    assert se.cur_pos() == 1
    se.write_u32(7)
    assert se.cur_pos() == 5
    se.write_vint64(1 << 60)
    assert se.cur_pos() == 14
    se.write_bytes(b'')
    assert se.cur_pos() == 14


def test_writes_only_append():
    se = Serializer.build_bytes_serializer()
    snapshots = []
    writes = [
        lambda: se.write_bool(False),
        lambda: se.write_u16(0xBEEF),
        lambda: se.write_vint64(300),
        lambda: se.write_bytes(b'test'),
        lambda: se.write_u64(1),
        lambda: se.write(Point(5, 6)),
    ]
    for write in writes:
        write()
        snapshots.append(se.cur_pos())
    data = bytes(se.finalize())
    assert snapshots == sorted(snapshots)
    expected = bytes.fromhex('00 efbe b204') + b'test' + bytes.fromhex('0100000000000000 0b 0600')
    assert data == expected


def test_written_bytes_are_copied():
    buffer = bytearray(b'abc')
    se = Serializer.build_bytes_serializer()
    se.write_bytes(buffer)
    buffer[0] = ord('z')
    assert bytes(se.finalize()) == b'abc'


def test_finalize_ends_the_session():
    se = Serializer.build_bytes_serializer()
    se.write_u16(1)
    assert bytes(se.finalize()) == b'\x01\x00'
    with pytest.raises(AttributeError):
        se.write_byte(0)


def test_finalize_not_supported():
    se = ByteOnlySerializer()
    with pytest.raises(TypeError):
        se.finalize()


def test_minimal_sink_gets_all_typed_writes():
    se = ByteOnlySerializer()
    se.write_bool(True)
    se.write_u16(0x1234)
    se.write_u32(1)
    se.write_vint64(2**64 - 1)
    se.write(Point(0, 0))
    assert bytes(se.data) == bytes.fromhex('01 3412 01000000 00ffffffffffffffff 01 0000')
    assert se.cur_pos() == len(se.data)


class Blob(Serializable):
    def __init__(self, data: bytes) -> None:
        self.data = data

    @override
    def write_into(self, serializer: Serializer) -> None:
        serializer.write_vint64(len(self.data))
        serializer.write_bytes(self.data)


def test_to_bytes_with_max_bytes():
    assert Blob(b'abc').to_bytes(max_bytes=4) == b'\x07abc'
    with pytest.raises(MaxBytesExceededError):
        Blob(b'abcd').to_bytes(max_bytes=4)
    assert Blob(b'abcd').to_bytes(max_bytes=5) == b'\x09abcd'


def test_to_bytes_unbounded_by_default():
    data = bytes(range(256)) * 4
    assert Blob(data).to_bytes() == b'\x02\x10' + data
