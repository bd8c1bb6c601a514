"""Session store and its collaborators."""

from .auth import AuthProvider, DemoAuthConfig, DemoAuthProvider
from .persistence import JsonFilePersistence, MemoryPersistence, PersistenceStore
from .store import DEFAULT_SESSION_KEY, SessionRecord, SessionStore, decode_session, encode_session

__all__ = [
    "AuthProvider",
    "DEFAULT_SESSION_KEY",
    "DemoAuthConfig",
    "DemoAuthProvider",
    "JsonFilePersistence",
    "MemoryPersistence",
    "PersistenceStore",
    "SessionRecord",
    "SessionStore",
    "decode_session",
    "encode_session",
]
