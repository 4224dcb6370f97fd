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

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, overload

from typing_extensions import Self

from .types import Buffer

if TYPE_CHECKING:
    from .adapters import MaxBytesSerializer
    from .bytes_serializer import BytesSerializer
    from .serializable import Serializable


class Serializer(ABC):
    """Append-only byte sink with typed write operations layered on top.

    Implementors only have to provide `write_byte` and `write_bytes` (and `cur_pos`), every other write is built on
    top of those two. Bytes that were written are never changed or removed, a serializer only grows.

    A serializer is not thread-safe, it is meant to be exclusively used by a single writer during a write session.
    """

    def finalize(self) -> Buffer:
        """Get the resulting byte sequence, the serializer cannot be reused after this."""
        raise TypeError('this serializer does not support finalization')

    @abstractmethod
    def cur_pos(self) -> int:
        """Number of bytes written so far."""
        raise NotImplementedError

    @abstractmethod
    def write_byte(self, data: int) -> None:
        """Write a single byte."""
        raise NotImplementedError

    @abstractmethod
    def write_bytes(self, data: Buffer) -> None:
        """Write a byte sequence."""
        # XXX: it is recommended that implementors of Serializer specialize this implementation
        for byte in bytes(memoryview(data)):
            self.write_byte(byte)

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a single byte, 0x01 for True and 0x00 for False."""
        from .encoding.bool import encode_bool
        encode_bool(self, value)

    def write_u16(self, value: int) -> None:
        """Write an unsigned 16-bit integer in little-endian byte order."""
        from .encoding.int import encode_int
        encode_int(self, value, length=2, signed=False)

    def write_u32(self, value: int) -> None:
        """Write an unsigned 32-bit integer in little-endian byte order."""
        from .encoding.int import encode_int
        encode_int(self, value, length=4, signed=False)

    def write_u64(self, value: int) -> None:
        """Write an unsigned 64-bit integer in little-endian byte order."""
        from .encoding.int import encode_int
        encode_int(self, value, length=8, signed=False)

    def write_vint64(self, value: int) -> None:
        """Write an unsigned 64-bit integer using the variable-length vint64 format (1 to 9 bytes).

        See `bytewire.serialization.encoding.vint64` for details on the format.
        """
        from .encoding.vint64 import encode_vint64
        encode_vint64(self, value)

    def write(self, value: Serializable) -> None:
        """Write a value that knows how to serialize itself, this serializer is passed to it unchanged."""
        value.write_into(self)

    def write_many(self, values: Iterable[Serializable]) -> None:
        """Write each value in order, no length prefix or separator is written."""
        for value in values:
            self.write(value)

    def write_struct(self, data: tuple[Any, ...], format: str) -> None:
        data_bytes = struct.pack(format, *data)
        self.write_bytes(data_bytes)

    def with_max_bytes(self, max_bytes: int) -> MaxBytesSerializer[Self]:
        """Helper method to wrap the current serializer with MaxBytesSerializer."""
        from .adapters import MaxBytesSerializer
        return MaxBytesSerializer(self, max_bytes)

    @overload
    def with_optional_max_bytes(self, max_bytes: None) -> Self:
        ...

    @overload
    def with_optional_max_bytes(self, max_bytes: int) -> MaxBytesSerializer[Self]:
        ...

    def with_optional_max_bytes(self, max_bytes: int | None) -> Self | MaxBytesSerializer[Self]:
        """Helper method to optionally wrap the current serializer."""
        if max_bytes is None:
            return self
        return self.with_max_bytes(max_bytes)

    @staticmethod
    def build_bytes_serializer() -> BytesSerializer:
        from .bytes_serializer import BytesSerializer
        return BytesSerializer()
