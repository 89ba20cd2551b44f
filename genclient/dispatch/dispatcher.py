"""Generation Dispatcher — orchestrates admission, credentials and the HTTP call.

Pipeline for one dispatch:
  1. Slot Admission Gate (generation-class operations only)
  2. Credential Resolver (override or personal token)
  3. POST to the endpoint with the bearer token
  4. Classify the response, write activity log entries, fire the
     personalTokenFailed event when a personal token is rejected
  5. Return DispatchResult or raise the terminal error

Usage:
    dispatcher = GenerationDispatcher(
        session=SessionContext.from_user(user),
        gate=SlotAdmissionGate(SupabaseSlotAllocator()),
        events=bus,
    )
    result = await dispatcher.dispatch(endpoint, body, "IMAGEN GENERATE", on_status=print)
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from genclient.core.config import Settings, settings as default_settings
from genclient.core.metrics import DISPATCH_ATTEMPTS
from genclient.dispatch.activity_log import LoggingLogSink, LogSink
from genclient.dispatch.admission import SlotAdmissionGate, is_generation_operation
from genclient.dispatch.credentials import CredentialResolver
from genclient.dispatch.errors import (
    ExhaustedCredentialsError,
    MissingCredentialError,
    RemoteCallError,
)
from genclient.dispatch.events import PERSONAL_TOKEN_FAILED, EventBus
from genclient.dispatch.proxies import resolve_server_url
from genclient.dispatch.slot_allocator import SupabaseSlotAllocator
from genclient.dispatch.types import (
    Credential,
    DispatchResult,
    LogEntry,
    LogStatus,
    StatusCallback,
    status_attempting,
)
from genclient.schemas.session import SessionContext

logger = logging.getLogger(__name__)


class GenerationDispatcher:
    """Single-attempt, admission-controlled dispatcher.

    Holds no per-dispatch state: concurrent ``dispatch`` calls share only the
    read-only session and the collaborators passed in here.
    """

    def __init__(
        self,
        session: SessionContext,
        gate: SlotAdmissionGate | None = None,
        resolver: CredentialResolver | None = None,
        log_sink: LogSink | None = None,
        events: EventBus | None = None,
        config: Settings | None = None,
    ):
        self.config = config or default_settings
        self.session = session
        self.gate = gate or SlotAdmissionGate(SupabaseSlotAllocator(self.config), config=self.config)
        self.resolver = resolver or CredentialResolver()
        self.log_sink = log_sink or LoggingLogSink()
        self.events = events or EventBus()

    async def dispatch(
        self,
        endpoint: str,
        body: Any,
        operation: str,
        override_credential: str | None = None,
        on_status: StatusCallback | None = None,
    ) -> DispatchResult:
        logger.info("Starting process for: %s", operation)

        if is_generation_operation(operation, self.config.generation_tag_list):
            server_url = resolve_server_url(endpoint, self.session, self.config)
            await self.gate.acquire(
                server_url,
                cooldown_seconds=self.config.slot_cooldown_seconds,
                on_status=on_status,
            )

        candidates = self.resolver.candidates(self.session, override=override_credential, operation=operation)
        if not candidates:
            logger.error("Aborting %s: no personal auth token found for the current user", operation)
            raise MissingCredentialError(
                f"Personal Auth Token is required for {operation}, but none was found. "
                "Please re-login or check your account."
            )

        last_error: RemoteCallError | None = None

        for credential in candidates:
            if on_status is not None:
                on_status(status_attempting(credential.label))
            logger.info("Attempting %s with %s (%s)", operation, credential.label, credential.masked)
            self._log(operation, f"Attempt with {credential.label}", credential.masked, LogStatus.SUCCESS)

            try:
                payload = await self._send(endpoint, body, credential, operation)
            except RemoteCallError as e:
                last_error = e
                DISPATCH_ATTEMPTS.labels(origin=credential.origin.value, status="error").inc()
                logger.error("%s failed for %s: %s", credential.label, operation, e.message)
                self._log(operation, f"{credential.label} failed", e.message, LogStatus.ERROR, error=e.message)

                if credential.is_personal:
                    self.events.dispatch(PERSONAL_TOKEN_FAILED)

                # Without an override this is a one-shot policy.
                if not override_credential:
                    break
                continue

            DISPATCH_ATTEMPTS.labels(origin=credential.origin.value, status="success").inc()
            logger.info("Success for %s with %s", operation, credential.label)
            self._log(operation, f"{credential.label} succeeded", credential.masked, LogStatus.SUCCESS)
            return DispatchResult(payload=payload, credential_used=credential.value)

        # candidates is non-empty and every failed attempt sets last_error
        logger.error("All attempts failed for %s. Final error: %s", operation, last_error.message)
        self._log(
            operation,
            "All available auth tokens failed.",
            f"Final error: {last_error.message}",
            LogStatus.ERROR,
            error=last_error.message,
        )
        raise ExhaustedCredentialsError(last_error) from last_error

    async def _send(self, endpoint: str, body: Any, credential: Credential, operation: str) -> Any:
        """POST the body and return the parsed JSON. Raises RemoteCallError on any failure."""
        try:
            content = json.dumps(body)
            # No timeout: generation calls run until the transport resolves.
            async with httpx.AsyncClient(timeout=None) as client:
                resp = await client.post(
                    endpoint,
                    content=content,
                    headers={
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {credential.value}",
                        "x-user-username": self.session.username_header(),
                    },
                )
        except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as e:
            raise RemoteCallError(str(e) or type(e).__name__) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteCallError(f"Invalid JSON response ({resp.status_code})", status_code=resp.status_code) from e

        logger.info("Response for %s with %s. Status: %d", operation, credential.label, resp.status_code)

        if not resp.is_success:
            raise RemoteCallError(_error_message(data, resp.status_code), status_code=resp.status_code, payload=data)
        return data

    def _log(self, operation: str, prompt: str, output: str, status: LogStatus, error: str | None = None) -> None:
        self.log_sink.add_log_entry(
            LogEntry(model=operation, prompt=prompt, output=output, status=status, error=error)
        )


def _error_message(data: Any, status_code: int) -> str:
    """Server-supplied message from ``error.message`` or ``message``, else a generic one."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])
    return f"API call failed ({status_code})"
