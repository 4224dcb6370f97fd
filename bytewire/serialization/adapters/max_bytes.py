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

from typing import TypeVar

from structlog import get_logger
from typing_extensions import override

from bytewire.serialization.exceptions import SerializationError
from bytewire.serialization.serializer import Serializer

from ..types import Buffer
from .generic_adapter import GenericSerializerAdapter

logger = get_logger()

S = TypeVar('S', bound=Serializer)


class MaxBytesExceededError(SerializationError):
    """ This error is raised when the adapted serializer reached its maximum bytes write.

    After this exception is raised the adapted serializer cannot be used anymore. Handlers of this exception are
    expected to either: bubble up the exception (or an equivalent exception), or return an error. Handlers should not
    try to write again on the same serializer.

    The write that exceeded the limit is not forwarded to the inner serializer, so nothing partial is appended by it,
    but whatever was written before is an incomplete value and should be considered a failed serialization overall.
    """
    pass


class MaxBytesSerializer(GenericSerializerAdapter[S]):
    """Fixed-capacity serializer, at most `max_bytes` can be written through it."""

    def __init__(self, serializer: S, max_bytes: int) -> None:
        if max_bytes < 0:
            raise ValueError('max_bytes cannot be negative')
        super().__init__(serializer)
        self.log = logger.new()
        self._max_bytes = max_bytes
        self._bytes_left = max_bytes

    def bytes_left(self) -> int:
        return max(self._bytes_left, 0)

    def _check_update_exceeds(self, write_size: int) -> None:
        self._bytes_left -= write_size
        if self._bytes_left < 0:
            self.log.error('serializer capacity exceeded', max_bytes=self._max_bytes, write_size=write_size)
            raise MaxBytesExceededError(f'cannot write more than {self._max_bytes} bytes')

    @override
    def write_byte(self, data: int) -> None:
        self._check_update_exceeds(1)
        super().write_byte(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        data_view = memoryview(data)
        self._check_update_exceeds(data_view.nbytes)
        super().write_bytes(data_view)
