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

"""
This module implements vint64, a variable-length encoding for unsigned 64-bit integers that uses 1 to 9 bytes.

References:
- https://docs.rs/vint64/latest/vint64/

Unlike LEB128, which spends one continuation bit on every byte, vint64 puts the whole length in the first byte. The
length `L` is written in unary on the lowest bits of the first byte: `L - 1` zero bits followed by a one bit (the
marker). The value is then shifted left by `L` bits and the first `L` bytes are written in little-endian order. Each
additional byte adds 7 bits of capacity:

| value range         | length |
|---------------------|--------|
| 0 .. 2**7 - 1       | 1      |
| 2**7 .. 2**14 - 1   | 2      |
| 2**14 .. 2**21 - 1  | 3      |
| ...                 | ...    |
| 2**49 .. 2**56 - 1  | 8      |
| 2**56 .. 2**64 - 1  | 9      |

A first byte of 8 zero bits has no marker, this is used as an escape for the 9-byte case: the zero byte is followed
by the value as 8 raw little-endian bytes, without any shifting. A reader counts the trailing zero bits `t` of the
first byte, when it's non-zero the length is `t + 1`, otherwise it's 9.

The length is always computed over a 64-bit width, independently of the platform, so the 9-byte boundary is fixed at
2**56.

>>> [encoded_len(n) for n in (0, 127, 128, 2**14 - 1, 2**14, 2**56 - 1, 2**56, 2**64 - 1)]
[1, 1, 2, 2, 3, 8, 9, 9]

>>> se = Serializer.build_bytes_serializer()
>>> encode_vint64(se, 0)  # writes 01
>>> encode_vint64(se, 127)  # writes ff
>>> encode_vint64(se, 128)  # writes 0202
>>> encode_vint64(se, 300)  # writes b204
>>> bytes(se.finalize()).hex()
'01ff0202b204'

>>> se = Serializer.build_bytes_serializer()
>>> encode_vint64(se, 2**64 - 1)  # writes the escape byte and then 8 raw bytes
>>> bytes(se.finalize()).hex()
'00ffffffffffffffff'

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_vint64(se, 2**64)
... except ValueError as e:
...     print(*e.args)
value does not fit in 64 bits
"""

from bytewire.serialization import Serializer

VINT64_BIT_WIDTH = 64
VINT64_MAX_LENGTH = 9
VINT64_MAX_VALUE = (1 << VINT64_BIT_WIDTH) - 1

# lead byte used by the 9-byte encoding, it has no marker bit
_ESCAPE_BYTE = 0x00


def _leading_zeros(value: int) -> int:
    """Count the leading zero bits of `value` in a 64-bit representation, 64 for zero."""
    return VINT64_BIT_WIDTH - value.bit_length()


def _check_domain(value: int) -> None:
    if value < 0:
        raise ValueError('cannot encode value <0 as unsigned')
    if value > VINT64_MAX_VALUE:
        raise ValueError('value does not fit in 64 bits')


def encoded_len(value: int) -> int:
    """ Returns how many bytes (1 to 9) the vint64 encoding of `value` takes.
    """
    _check_domain(value)
    zeros = _leading_zeros(value)
    # saturating subtraction, a value with the top bit set has no leading zeros
    groups = max(zeros - 1, 0) // 7
    return VINT64_MAX_LENGTH - min(groups, VINT64_MAX_LENGTH - 1)


def encode_vint64(serializer: Serializer, value: int) -> None:
    """ Encodes an unsigned 64-bit integer using vint64.

    This module's docstring has more details on the format and examples.
    """
    length = encoded_len(value)

    if length == VINT64_MAX_LENGTH:
        # a single append, a bounded serializer either takes all 9 bytes or none of them
        serializer.write_bytes(bytes([_ESCAPE_BYTE]) + value.to_bytes(8, byteorder='little', signed=False))
        return

    encoded = ((value << 1) | 1) << (length - 1)
    # bits above the first `length` bytes are all zero, the length was chosen so the shifted value fits
    serializer.write_bytes(encoded.to_bytes(length, byteorder='little', signed=False))
