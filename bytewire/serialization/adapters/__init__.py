from .generic_adapter import GenericSerializerAdapter
from .max_bytes import MaxBytesExceededError, MaxBytesSerializer

__all__ = [
    'GenericSerializerAdapter',
    'MaxBytesExceededError',
    'MaxBytesSerializer',
]
