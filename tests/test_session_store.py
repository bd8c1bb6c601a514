from __future__ import annotations

from pathlib import Path

import pytest

from legallens.errors import InvalidCredentials, NoActiveSession, TransportFailure
from legallens.models import Session
from legallens.session.auth import DemoAuthConfig, DemoAuthProvider
from legallens.session.persistence import JsonFilePersistence, MemoryPersistence
from legallens.session.store import SessionStore, decode_session

KEY = "legal-lens-user"


def _auth() -> DemoAuthProvider:
    return DemoAuthProvider(DemoAuthConfig(latency_seconds=0, sign_out_latency_seconds=0))


class FailingSavePersistence(MemoryPersistence):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def save(self, key: str, blob: str) -> None:
        if self.fail:
            raise OSError("disk full")
        super().save(key, blob)


class FailingSignOutAuth(DemoAuthProvider):
    async def sign_out(self) -> None:
        raise TransportFailure("offline")


class RecordingProfileAuth(DemoAuthProvider):
    def __init__(self, config: DemoAuthConfig) -> None:
        super().__init__(config)
        self.updates: list[dict[str, object]] = []

    async def update_profile(self, session, fields) -> None:
        self.updates.append(dict(fields))


@pytest.mark.asyncio
async def test_login_sets_and_persists_session():
    persistence = MemoryPersistence()
    store = SessionStore(_auth(), persistence)

    session = await store.login("test@example.com", "password")

    assert session == Session(id="123", email="test@example.com", display_name="Test User")
    assert store.current == session
    assert decode_session(persistence.load(KEY)) == session


@pytest.mark.asyncio
async def test_login_rejects_wrong_password_without_state_change():
    persistence = MemoryPersistence()
    store = SessionStore(_auth(), persistence)

    with pytest.raises(InvalidCredentials):
        await store.login("test@example.com", "nope")

    assert store.current is None
    assert persistence.load(KEY) is None


@pytest.mark.asyncio
async def test_signup_always_succeeds_without_display_name():
    persistence = MemoryPersistence()
    store = SessionStore(_auth(), persistence)

    session = await store.signup("new@example.com", "whatever")

    assert session.email == "new@example.com"
    assert session.display_name is None
    assert decode_session(persistence.load(KEY)) == session


@pytest.mark.asyncio
async def test_logout_clears_memory_and_blob_and_is_idempotent():
    persistence = MemoryPersistence()
    store = SessionStore(_auth(), persistence)
    await store.login("test@example.com", "password")

    await store.logout()
    await store.logout()

    assert store.current is None
    assert persistence.load(KEY) is None
    assert SessionStore(_auth(), persistence).restore() is None


@pytest.mark.asyncio
async def test_logout_clears_locally_when_remote_sign_out_fails():
    persistence = MemoryPersistence()
    store = SessionStore(FailingSignOutAuth(DemoAuthConfig(latency_seconds=0)), persistence)
    await store.login("test@example.com", "password")

    await store.logout()

    assert store.current is None
    assert persistence.load(KEY) is None


@pytest.mark.asyncio
async def test_update_profile_requires_session():
    store = SessionStore(_auth(), MemoryPersistence())
    with pytest.raises(NoActiveSession):
        await store.update_profile(display_name="Someone")


@pytest.mark.asyncio
async def test_update_profile_merges_and_repersists():
    persistence = MemoryPersistence()
    store = SessionStore(_auth(), persistence)
    await store.signup("new@example.com", "pw")

    updated = await store.update_profile(display_name="Jane Doe")

    assert updated.display_name == "Jane Doe"
    assert updated.email == "new@example.com"
    assert decode_session(persistence.load(KEY)) == updated


@pytest.mark.asyncio
async def test_update_profile_without_fields_keeps_display_name():
    persistence = MemoryPersistence()
    auth = RecordingProfileAuth(DemoAuthConfig(latency_seconds=0))
    store = SessionStore(auth, persistence)
    await store.login("test@example.com", "password")

    session = await store.update_profile()

    assert session.display_name == "Test User"
    assert decode_session(persistence.load(KEY)).display_name == "Test User"
    assert auth.updates == []


@pytest.mark.asyncio
async def test_update_profile_sends_only_given_fields():
    auth = RecordingProfileAuth(DemoAuthConfig(latency_seconds=0))
    store = SessionStore(auth, MemoryPersistence())
    await store.login("test@example.com", "password")

    await store.update_profile(display_name="Jane")

    assert auth.updates == [{"display_name": "Jane"}]


@pytest.mark.asyncio
async def test_failed_write_keeps_previous_session():
    persistence = FailingSavePersistence()
    store = SessionStore(_auth(), persistence)
    previous = await store.login("test@example.com", "password")

    persistence.fail = True
    with pytest.raises(OSError):
        await store.update_profile(display_name="Changed")

    assert store.current == previous
    assert decode_session(persistence.load(KEY)) == previous


def test_restore_reads_camel_case_blob():
    persistence = MemoryPersistence({KEY: '{"uid": "123", "email": "test@example.com", "displayName": "Test User"}'})
    store = SessionStore(_auth(), persistence)

    session = store.restore()

    assert session == Session(id="123", email="test@example.com", display_name="Test User")
    assert store.is_authenticated


@pytest.mark.parametrize("blob", ["not json", "[]", '{"email": "a@b.c"}', '{"uid": "", "email": "a@b.c"}'])
def test_restore_ignores_malformed_blob(blob: str):
    store = SessionStore(_auth(), MemoryPersistence({KEY: blob}))
    assert store.restore() is None
    assert store.current is None


def test_restore_without_blob():
    assert SessionStore(_auth(), MemoryPersistence()).restore() is None


def test_restore_ignores_undecodable_session_file(tmp_path: Path):
    persistence = JsonFilePersistence(tmp_path)
    persistence.path_for(KEY).write_bytes(b'{"uid": "1", "email": "\xff\xfe"}')
    store = SessionStore(_auth(), persistence)

    assert store.restore() is None
    assert not store.is_authenticated
