"""Vrux errors."""


class VruxError(Exception):
    """Base exception for vrux."""


class PersistenceError(VruxError):
    """Raised when a storage backend cannot save or load a history."""


class HistoryDecodeError(VruxError):
    """Raised when serialized history is malformed or has the wrong shape."""
