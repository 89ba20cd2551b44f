"""Remote slot allocator clients.

The allocator is a Postgres function exposed through Supabase's PostgREST
RPC endpoint:

    POST {SUPABASE_URL}/rest/v1/rpc/request_generation_slot
    {"cooldown_seconds": 10, "server_url": "https://gemx.example.com"}
    → true | false

It is the single source of truth for slot capacity across all clients that
share a server. Each call is an independent admission attempt.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from genclient.core.config import Settings, settings as default_settings
from genclient.dispatch.errors import SlotAllocatorError
from genclient.dispatch.types import SlotRequest

logger = logging.getLogger(__name__)


class SlotAllocator(Protocol):
    async def request_slot(self, request: SlotRequest) -> bool:
        """Return True when a slot was granted. Raise SlotAllocatorError on faults."""
        ...


class SupabaseSlotAllocator:
    """Calls the ``request_generation_slot`` RPC over PostgREST."""

    def __init__(self, config: Settings | None = None):
        config = config or default_settings
        self.rpc_url = config.slot_rpc_url
        self.api_key = config.supabase_anon_key
        self.timeout = config.slot_rpc_timeout_seconds

    async def request_slot(self, request: SlotRequest) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.rpc_url,
                    json=request.to_rpc_params(),
                    headers={
                        "apikey": self.api_key,
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.HTTPError as e:
            raise SlotAllocatorError(f"{type(e).__name__}: {e}") from e

        if resp.status_code >= 400:
            raise SlotAllocatorError(self._error_message(resp), status_code=resp.status_code)

        try:
            granted = resp.json()
        except ValueError as e:
            raise SlotAllocatorError(f"Invalid allocator response: {resp.text[:200]}") from e

        if not isinstance(granted, bool):
            raise SlotAllocatorError(f"Unexpected allocator response: {granted!r}")
        return granted

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            data = resp.json()
        except ValueError:
            return f"HTTP {resp.status_code}: {resp.text[:200]}"
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"HTTP {resp.status_code}"
