# src/bsky_session_bff/session_manager.py

import typing

from fastapi.responses import Response

from .auth_utils import AtprotoSessionStore
from .cookies import parse_cookies, session_from_cookies, set_session_cookies
from .session_data import SessionData, SessionResult


async def initialize_session_data(
        store: AtprotoSessionStore,
        cookie_header: typing.Optional[str],
        response: typing.Optional[Response] = None,
) -> SessionResult:
    """
    Trusts a complete set of session cookies, otherwise logs in and writes
    fresh cookies to the response. Errors are re-raised to the request handler.
    """
    try:
        session = None
        if cookie_header:
            parsed_cookies = parse_cookies(cookie_header)
            print(f"SESSION: Parsed cookie keys: {sorted(parsed_cookies)}")
            session = session_from_cookies(parsed_cookies)
            if session is None:
                print("SESSION: Invalid cookies, calling login")
        else:
            print("SESSION: No cookies, calling login")

        if session is not None:
            return SessionResult(session=session, tokens_updated=False)

        session = await store.login()
        if response is not None:
            set_session_cookies(response, session)
        return SessionResult(session=session, tokens_updated=True)

    except Exception as e:
        print(f"SESSION: Error initializing session data: {e}")
        raise


async def ensure_valid_session(
        store: AtprotoSessionStore,
        session: SessionData,
        response: typing.Optional[Response] = None,
) -> SessionData:
    """
    Resumes a cookie-supplied session, falling back to a fresh login when the
    provider rejects it. New tokens are written back to the response.
    """
    print(f"SESSION: ensure_valid_session called for handle: {session.handle}")
    try:
        current = await store.resume(session)
        print("SESSION: Session resumed successfully")
    except Exception as e:
        print(f"SESSION: Session resume failed: {e!r}")
        current = await store.login()

    if response is not None and not current.same_tokens(session):
        set_session_cookies(response, current)
    return current
