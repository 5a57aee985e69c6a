"""Storage integrations for vrux.

- storage: history encoding plus memory and file backends
"""

from .storage import (
    FileBackend,
    MemoryBackend,
    StorageBackend,
    decode_history,
    encode_history,
)

__all__ = [
    "FileBackend",
    "MemoryBackend",
    "StorageBackend",
    "decode_history",
    "encode_history",
]
