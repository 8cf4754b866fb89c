# src/bsky_session_bff/session_data.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Tuple

# Cookie key for every session field, in the order cookies are written.
COOKIE_FIELDS: Tuple[str, ...] = ("accessJwt", "refreshJwt", "handle", "did", "active", "status")


class SessionData(BaseModel):
    """
    Represents an AT Protocol session as it travels between the provider and the browser.
    The server keeps it only for the duration of one request, the cookie jar is the store.
    """
    model_config = ConfigDict(populate_by_name=True)

    access_jwt: str = Field(alias="accessJwt")
    refresh_jwt: str = Field(alias="refreshJwt")
    handle: str
    did: str
    active: bool = True
    status: Optional[str] = None  # Only set when the account is not active

    def same_tokens(self, other: "SessionData") -> bool:
        return self.access_jwt == other.access_jwt and self.refresh_jwt == other.refresh_jwt


class SessionResult(BaseModel):
    session: SessionData
    tokens_updated: bool
