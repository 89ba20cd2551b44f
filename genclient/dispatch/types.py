"""Core types and DTOs for the generation dispatch layer."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Progress callback for UI status lines; "" clears the status.
StatusCallback = Callable[[str], None]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CredentialOrigin(str, Enum):
    """Where a credential came from."""

    PERSONAL = "personal"  # User's own long-lived token from the session
    SPECIFIC = "specific"  # Caller-supplied override (e.g. token tests)


class LogStatus(str, Enum):
    SUCCESS = "Success"
    ERROR = "Error"


# ---------------------------------------------------------------------------
# Status messages
# ---------------------------------------------------------------------------

STATUS_QUEUED = "All slots are currently in use. You are in the waiting queue..."
STATUS_RETRYING = "Retrying to acquire a slot in 2 seconds..."
STATUS_ACQUIRED = "Slot acquired. Starting generation..."
STATUS_CLEARED = ""


def status_attempting(label: str) -> str:
    return f"Attempting generation with {label}..."


# ---------------------------------------------------------------------------
# Credential
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Credential:
    """A bearer token resolved for a single dispatch."""

    value: str
    origin: CredentialOrigin

    def __post_init__(self):
        if not self.value:
            raise ValueError("Credential value must not be empty")

    @property
    def is_personal(self) -> bool:
        return self.origin == CredentialOrigin.PERSONAL

    @property
    def label(self) -> str:
        """Human-readable kind used in status lines and logs."""
        return "Personal Token" if self.is_personal else "Provided Token"

    @property
    def masked(self) -> str:
        """Last 6 characters only — the full secret is never logged."""
        return f"...{self.value[-6:]}"

    def __repr__(self) -> str:
        return f"Credential(origin={self.origin.value}, value={self.masked})"


# ---------------------------------------------------------------------------
# Slot request — sent to the remote allocator
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SlotRequest:
    server_url: str
    cooldown_seconds: int = 10

    def to_rpc_params(self) -> dict:
        return {
            "cooldown_seconds": self.cooldown_seconds,
            "server_url": self.server_url,
        }


# ---------------------------------------------------------------------------
# Dispatch result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DispatchResult:
    """Successful outcome of a dispatch. Failures are raised, not returned."""

    payload: Any
    credential_used: str


# ---------------------------------------------------------------------------
# Activity log entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LogEntry:
    """One record for the AI activity log."""

    model: str
    prompt: str
    output: str
    status: LogStatus
    token_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        data = {
            "model": self.model,
            "prompt": self.prompt,
            "output": self.output,
            "tokenCount": self.token_count,
            "status": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
