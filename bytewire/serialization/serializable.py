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

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .serializer import Serializer


class Serializable(ABC):
    """A value that knows how to write itself into a Serializer.

    Implementors are fully responsible for their own byte layout and may use any of the typed writes of the serializer
    they are given, including `Serializer.write` for nested values.
    """

    @abstractmethod
    def write_into(self, serializer: Serializer) -> None:
        raise NotImplementedError

    def to_bytes(self, *, max_bytes: Optional[int] = None) -> bytes:
        """Serialize this value into a new in-memory serializer and return the resulting bytes.

        With `max_bytes` the result is limited to that many bytes and `MaxBytesExceededError` is raised if the value
        needs more, without it there is no limit.
        """
        from bytewire.serialization.serializer import Serializer

        serializer = Serializer.build_bytes_serializer()
        self.write_into(serializer.with_optional_max_bytes(max_bytes))
        return bytes(serializer.finalize())
