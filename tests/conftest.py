import pytest

from genclient.core.config import Settings
from genclient.dispatch.activity_log import InMemoryLogSink
from genclient.dispatch.events import PERSONAL_TOKEN_FAILED, EventBus
from genclient.schemas.session import SessionContext
from tests.fakes import IMAGEN_URL, VEO_URL, RecordingSleep


@pytest.fixture
def config():
    return Settings(
        _env_file=None,
        app_env="production",
        veo_fallback_url=VEO_URL,
        imagen_fallback_url=IMAGEN_URL,
        supabase_url="https://db.test",
        supabase_anon_key="anon-key",
    )


@pytest.fixture
def user():
    return {"id": "u-1", "username": "alice", "personalAuthToken": "abc123xyz999"}


@pytest.fixture
def session(user):
    return SessionContext.from_user(user)


@pytest.fixture
def log_sink():
    return InMemoryLogSink()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def fallback_events():
    """EventBus plus a list recording each personalTokenFailed dispatch."""
    bus = EventBus()
    fired: list[str] = []
    bus.subscribe(PERSONAL_TOKEN_FAILED, lambda: fired.append(PERSONAL_TOKEN_FAILED))
    return bus, fired
