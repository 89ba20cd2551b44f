"""Session and identity schemas.

The client keeps the signed-in user as a JSON document (as written by the
login flow). ``SessionContext`` carries that document explicitly so every
dispatch reads the identity it was handed instead of reaching into shared
storage.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class CurrentUser(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | int
    username: str | None = None
    personal_auth_token: str | None = Field(default=None, alias="personalAuthToken")

    @field_validator("id")
    @classmethod
    def _id_not_empty(cls, v: str | int) -> str | int:
        if v == "":
            raise ValueError("user id must not be empty")
        return v


class _StoredToken(BaseModel):
    """Only the token field; the rest of the stored user is not checked."""

    model_config = ConfigDict(extra="ignore")

    personal_auth_token: str | None = Field(default=None, alias="personalAuthToken")


@dataclass(frozen=True)
class SessionContext:
    """Read-only identity state for one client session."""

    current_user_json: str | None = None
    selected_proxy_server: str | None = None

    @classmethod
    def from_user(cls, user: dict | None, selected_proxy_server: str | None = None) -> SessionContext:
        raw = json.dumps(user) if user is not None else None
        return cls(current_user_json=raw, selected_proxy_server=selected_proxy_server)

    def current_user(self) -> CurrentUser | None:
        """Parse the stored user. Malformed state yields None, never an exception."""
        if not self.current_user_json:
            return None
        try:
            return CurrentUser.model_validate_json(self.current_user_json)
        except ValidationError as e:
            logger.error("Failed to parse current user from session state: %s", e)
            return None

    def personal_token(self) -> str | None:
        """The stored personalAuthToken, whether or not the rest of the user is valid."""
        if not self.current_user_json:
            return None
        try:
            stored = _StoredToken.model_validate_json(self.current_user_json)
        except ValidationError as e:
            logger.error("Could not parse user from session state to get personal token: %s", e)
            return None
        return stored.personal_auth_token or None

    def username_header(self) -> str:
        user = self.current_user()
        return user.username if user and user.username else "unknown"
