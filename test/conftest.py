import pytest
from fastapi.testclient import TestClient

from main import create_app
from routers.ws import manager as ws_manager
from storage import InMemoryTaskStore, JsonFileTaskStore


class RecordingNotifier:
    """Stands in for QuoteNotifier without touching the network."""

    def __init__(self, message="Stay hungry - Someone"):
        self.message = message
        self.calls = []

    def notify(self, task=None):
        self.calls.append(task)
        return self.message


@pytest.fixture
def tasks_file(tmp_path):
    return tmp_path / "tasks.json"


@pytest.fixture
def file_store(tasks_file):
    return JsonFileTaskStore(tasks_file)


@pytest.fixture
def memory_store():
    return InMemoryTaskStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(memory_store, notifier):
    app = create_app(store=memory_store, notifier=notifier)
    # Entering the client runs the lifespan and keeps HTTP and WebSocket
    # traffic on one event loop.
    with TestClient(app) as test_client:
        yield test_client
    # The WebSocket manager is module level; forget connections between tests.
    ws_manager.active_connections.clear()


@pytest.fixture
def work_task():
    return {"etiqueta": "Work", "descripcion": "Report", "fecha_limite": "2024-02-10"}
