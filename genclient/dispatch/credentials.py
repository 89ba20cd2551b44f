"""Credential Resolver — picks the bearer token for a dispatch.

Resolution order:
  1. Caller-supplied override → origin SPECIFIC
  2. The session user's personalAuthToken → origin PERSONAL
  3. Nothing → None (the dispatcher raises MissingCredentialError)
"""

from __future__ import annotations

import logging

from genclient.dispatch.types import Credential, CredentialOrigin
from genclient.schemas.session import SessionContext

logger = logging.getLogger(__name__)


class CredentialResolver:
    """Resolves at most one credential per dispatch.

    ``candidates()`` is the extension point for multi-credential fallback;
    today it returns the single resolved credential (or nothing).
    """

    def resolve(
        self,
        session: SessionContext,
        override: str | None = None,
        operation: str = "",
    ) -> Credential | None:
        if override:
            logger.info("Using specific token provided for %s", operation)
            return Credential(value=override, origin=CredentialOrigin.SPECIFIC)

        token = session.personal_token()
        if token:
            logger.info("Using user's personal token for %s", operation)
            return Credential(value=token, origin=CredentialOrigin.PERSONAL)

        logger.warning("No personal auth token found for the current user (%s)", operation)
        return None

    def candidates(
        self,
        session: SessionContext,
        override: str | None = None,
        operation: str = "",
    ) -> list[Credential]:
        credential = self.resolve(session, override=override, operation=operation)
        return [credential] if credential else []
