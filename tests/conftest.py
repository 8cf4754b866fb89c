"""
Pytest config.

Puts `src/` on sys.path so the tests run without installing the package, and
provides an in-memory session store so no test talks to Bluesky.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_src_on_syspath() -> None:
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_dir_str = str(src_dir)
    if src_dir_str not in sys.path:
        sys.path.insert(0, src_dir_str)


_ensure_src_on_syspath()

from bsky_session_bff.session_data import SessionData  # noqa: E402


class FakeSessionStore:
    """Stands in for AtprotoSessionStore and records how it was used."""

    def __init__(self, login_session: SessionData, resume_result=None, login_error=None):
        self.login_session = login_session
        # None: resume returns its input; an exception: resume raises it; a session: rotation
        self.resume_result = resume_result
        self.login_error = login_error
        self.login_calls = 0
        self.resume_calls: list[SessionData] = []

    async def login(self) -> SessionData:
        self.login_calls += 1
        if self.login_error is not None:
            raise self.login_error
        return self.login_session

    async def resume(self, session: SessionData) -> SessionData:
        self.resume_calls.append(session)
        if isinstance(self.resume_result, Exception):
            raise self.resume_result
        if self.resume_result is not None:
            return self.resume_result
        return session


@pytest.fixture
def login_session() -> SessionData:
    return SessionData(
        access_jwt="mocked_access_token",
        refresh_jwt="mocked_refresh_token",
        handle="mocked.bsky.social",
        did="did:plc:mocked",
        active=True,
        status="active",
    )


@pytest.fixture
def fake_store(login_session: SessionData) -> FakeSessionStore:
    return FakeSessionStore(login_session)


@pytest.fixture
def store_factory(login_session: SessionData):
    """Builds a FakeSessionStore whose login() answers with login_session."""

    def _make(**kwargs) -> FakeSessionStore:
        return FakeSessionStore(login_session, **kwargs)

    return _make
