# src/bsky_session_bff/auth_utils.py

from typing import Dict, Optional

from atproto import AsyncClient, models

from .config import Settings
from .session_data import SessionData


def _auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class AtprotoSessionStore:
    """
    Thin adapter over the atproto SDK.

    The underlying AsyncClient is never logged in: every call carries its own
    tokens, so one store can serve concurrent requests without sharing a
    "current session" between them.
    """

    def __init__(self, identifier: str, password: str, service_url: str = "https://bsky.social",
                 client: Optional[AsyncClient] = None):
        self._identifier = identifier
        self._password = password
        self._client = client or AsyncClient(base_url=f"{service_url.rstrip('/')}/xrpc")

    @classmethod
    def from_settings(cls, settings: Settings) -> "AtprotoSessionStore":
        return cls(
            identifier=settings.IDENTIFIER,
            password=settings.PASSWORD,
            service_url=settings.SERVICE_URL,
        )

    async def login(self) -> SessionData:
        """
        Creates a brand-new session with the configured app password.
        Network and credential errors propagate to the caller.
        """
        result = await self._client.com.atproto.server.create_session(
            models.ComAtprotoServerCreateSession.Data(
                identifier=self._identifier,
                password=self._password,
            )
        )
        session = _to_session_data(result)
        print(f"AUTH_UTILS: login - New session created for handle: {session.handle}, did: {session.did}")
        return session

    async def resume(self, session: SessionData) -> SessionData:
        """
        Validates the session against the provider, refreshing it when the
        access token is no longer accepted. Returns the input unchanged unless
        the token pair was rotated.
        """
        current = session
        try:
            await self._client.com.atproto.server.get_session(headers=_auth_headers(session.access_jwt))
            print(f"AUTH_UTILS: resume - Access token still valid for handle: {session.handle}")
        except Exception as e:
            print(f"AUTH_UTILS: resume - Access token rejected ({e.__class__.__name__}), refreshing session")
            refreshed = await self._client.com.atproto.server.refresh_session(
                headers=_auth_headers(session.refresh_jwt)
            )
            current = _to_session_data(refreshed)

        if session.same_tokens(current):
            return session
        print(f"AUTH_UTILS: resume - Tokens were rotated for handle: {current.handle}")
        return current


def _to_session_data(result) -> SessionData:
    # createSession and refreshSession answer with the same session fields.
    return SessionData(
        access_jwt=result.access_jwt,
        refresh_jwt=result.refresh_jwt,
        handle=result.handle,
        did=result.did,
        active=True if result.active is None else result.active,
        status=result.status or None,
    )
