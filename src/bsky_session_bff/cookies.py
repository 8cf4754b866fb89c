# src/bsky_session_bff/cookies.py

from typing import Dict, List, Mapping, Optional

from fastapi.responses import Response

from .session_data import COOKIE_FIELDS, SessionData

COOKIE_OPTIONS = "HttpOnly; Path=/; SameSite=Strict; Secure"

# Fields that must carry a value for a cookie set to be trusted. An empty
# status is the serialized form of "no status".
_NON_EMPTY_FIELDS = ("accessJwt", "refreshJwt", "handle", "did", "active")


def parse_cookies(cookie_header: str) -> Dict[str, str]:
    """
    Parses a raw Cookie header into a dict. Values are split on the first '=',
    a key without '=' maps to "" and the last duplicate wins.
    """
    cookies: Dict[str, str] = {}
    for cookie in cookie_header.split(";"):
        if not cookie.strip():
            continue
        key, _, value = cookie.partition("=")
        cookies[key.strip()] = value.strip()
    return cookies


def _cookie_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def serialize_session(session: SessionData) -> List[str]:
    """One Set-Cookie line per session field. Values are written as-is, no escaping."""
    values = session.model_dump(by_alias=True)
    return [f"{field}={_cookie_value(values[field])}; {COOKIE_OPTIONS}" for field in COOKIE_FIELDS]


def set_session_cookies(response: Response, session: SessionData) -> None:
    for line in serialize_session(session):
        response.headers.append("set-cookie", line)
    print(f"COOKIES: New cookies set for handle: {session.handle}")


def session_from_cookies(cookies: Mapping[str, str]) -> Optional[SessionData]:
    """
    Rebuilds a session from parsed cookies.
    Returns None unless all six fields are present, partial sessions are discarded.
    """
    if any(field not in cookies for field in COOKIE_FIELDS):
        return None
    if any(not cookies[field] for field in _NON_EMPTY_FIELDS):
        return None
    return SessionData(
        access_jwt=cookies["accessJwt"],
        refresh_jwt=cookies["refreshJwt"],
        handle=cookies["handle"],
        did=cookies["did"],
        active=cookies["active"] == "true",
        status=cookies["status"] or None,
    )
