# dependencies.py
from starlette.requests import HTTPConnection

from quotes import QuoteNotifier
from storage import TaskStore


def get_store(connection: HTTPConnection) -> TaskStore:
    """
    Returns the task store attached to the application by create_app().
    Works for both HTTP and WebSocket routes, and lets tests swap in an
    in-memory store.
    """
    return connection.app.state.store


def get_notifier(connection: HTTPConnection) -> QuoteNotifier:
    return connection.app.state.notifier
