"""Test doubles shared across dispatch tests."""

from genclient.dispatch.types import SlotRequest

IMAGEN_URL = "https://gemx.test"
VEO_URL = "https://veox.test"


class ScriptedAllocator:
    """Slot allocator returning scripted outcomes (bool or exception) in order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[SlotRequest] = []

    async def request_slot(self, request: SlotRequest) -> bool:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if self.outcomes else True
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
