"""
Shared fixtures: a fresh context store, a recording stand-in for the remote
entity API, a dispatcher wired to both, and an API client over the app.
"""

import pytest
from fastapi.testclient import TestClient

from app.core.errors import RemoteError
from app.main import create_app
from app.services.context_store import ContextStore
from app.services.dispatcher import RequestDispatcher


class StubEntityClient:
    """Records every call; answers from canned entities or raises a queued error."""

    def __init__(self):
        self.calls = []
        self.entities = {}
        self.error = None

    async def get(self, kind, entity_id):
        self.calls.append(("get", kind, entity_id))
        if self.error:
            raise self.error
        try:
            return self.entities[(kind.value, entity_id)]
        except KeyError:
            raise RemoteError(f"{kind.value} {entity_id} not found")

    async def create(self, kind, payload):
        self.calls.append(("create", kind, payload))
        if self.error:
            raise self.error
        return {"id": "new-1", **payload}

    async def close(self):
        pass


@pytest.fixture
def store():
    return ContextStore()


@pytest.fixture
def entity_client():
    return StubEntityClient()


@pytest.fixture
def dispatcher(store, entity_client):
    d = RequestDispatcher(context_store=store, entity_client=entity_client)
    d.register_principal("model-a")
    return d


@pytest.fixture
def api(store, entity_client):
    """TestClient with lifespan run, so app.state.dispatcher exists."""
    app = create_app(context_store=store, remote_client=entity_client)
    with TestClient(app) as client:
        yield client
