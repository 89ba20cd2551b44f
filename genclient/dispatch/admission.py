"""Slot Admission Gate — cooperative polling against the remote allocator.

Only generation-class operations pass through the gate. The gate keeps
asking the allocator for a time-boxed slot on the target server:

  granted     → return
  not granted → wait a fixed interval, ask again
  error       → AdmissionError (a systemic fault, never retried)

There is no deadline: the allocator's cooldown contract is the only bound.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from genclient.core.config import Settings, settings as default_settings
from genclient.core.metrics import SLOT_REQUESTS, SLOT_WAIT_SECONDS
from genclient.dispatch.errors import AdmissionError, SlotAllocatorError
from genclient.dispatch.slot_allocator import SlotAllocator
from genclient.dispatch.types import (
    STATUS_ACQUIRED,
    STATUS_CLEARED,
    STATUS_QUEUED,
    STATUS_RETRYING,
    SlotRequest,
    StatusCallback,
)

logger = logging.getLogger(__name__)


def is_generation_operation(operation: str, tags: list[str] | None = None) -> bool:
    """True when the operation's logical name carries a generation-class tag."""
    tags = default_settings.generation_tag_list if tags is None else tags
    return any(tag in operation for tag in tags)


class SlotAdmissionGate:
    """Blocks the caller until the allocator grants a slot.

    Usage:
        gate = SlotAdmissionGate(SupabaseSlotAllocator())
        await gate.acquire("https://gemx.example.com", cooldown_seconds=10, on_status=print)
    """

    def __init__(
        self,
        allocator: SlotAllocator,
        poll_interval: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        config: Settings | None = None,
    ):
        config = config or default_settings
        self.allocator = allocator
        self.poll_interval = poll_interval if poll_interval is not None else config.slot_poll_interval_seconds
        self._sleep = sleep

    async def acquire(
        self,
        server_url: str,
        cooldown_seconds: int = 10,
        on_status: StatusCallback | None = None,
    ) -> None:
        _notify(on_status, STATUS_QUEUED)
        start = time.monotonic()
        polls = 0

        while True:
            polls += 1
            try:
                granted = await self.allocator.request_slot(
                    SlotRequest(server_url=server_url, cooldown_seconds=cooldown_seconds)
                )
            except SlotAllocatorError as e:
                SLOT_REQUESTS.labels(outcome="error").inc()
                logger.error("Error requesting generation slot for %s: %s", server_url, e.message)
                _notify(on_status, STATUS_CLEARED)
                raise AdmissionError(f"Database error while requesting a generation slot: {e.message}") from e

            if granted:
                SLOT_REQUESTS.labels(outcome="granted").inc()
                break

            SLOT_REQUESTS.labels(outcome="denied").inc()
            logger.debug("No slot free on %s (poll %d), retrying in %.1fs", server_url, polls, self.poll_interval)
            _notify(on_status, STATUS_RETRYING)
            await self._sleep(self.poll_interval)

        waited = time.monotonic() - start
        SLOT_WAIT_SECONDS.observe(waited)
        logger.info("Generation slot acquired on %s after %d poll(s) (%.1fs)", server_url, polls, waited)
        _notify(on_status, STATUS_ACQUIRED)


def _notify(on_status: StatusCallback | None, message: str) -> None:
    if on_status is not None:
        on_status(message)
