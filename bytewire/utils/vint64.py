#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from typing import Optional

from bytewire.serialization import SerializationError, Serializer
from bytewire.serialization.adapters import MaxBytesExceededError
from bytewire.serialization.encoding.vint64 import encode_vint64, encoded_len

__all__ = ['encode_unsigned', 'encoded_len']


def encode_unsigned(value: int, *, max_bytes: Optional[int] = None) -> bytes:
    """
    Receive an unsigned 64-bit integer and return its vint64-encoded bytes.

    >>> encode_unsigned(0) == bytes([0x01])
    True
    >>> encode_unsigned(128) == bytes([0x02, 0x02])
    True
    >>> encode_unsigned(2**64 - 1) == bytes([0x00]) + bytes([0xFF]) * 8
    True
    """
    serializer: Serializer = Serializer.build_bytes_serializer()
    try:
        encode_vint64(serializer.with_optional_max_bytes(max_bytes), value)
    except MaxBytesExceededError as e:
        raise ValueError(f'cannot encode more than {max_bytes} bytes') from e
    except SerializationError as e:
        raise ValueError('serialization error') from e
    return bytes(serializer.finalize())
