# quotes.py
import logging
from typing import Any, Optional

import requests

from models import Task

logger = logging.getLogger(__name__)

DEGRADED_MESSAGE = "Task completed. Keep going, you're doing great!"


class QuoteUnavailable(Exception):
    pass


def parse_quote(payload: Any) -> str:
    """
    Extracts "text - author" from a quote API response.
    Accepts the ZenQuotes shape ([{"q": ..., "a": ...}]) and the common
    {"quote"/"content": ..., "author": ...} shape.
    """
    if isinstance(payload, list):
        if not payload:
            raise QuoteUnavailable("Quote API returned an empty list")
        payload = payload[0]
    if not isinstance(payload, dict):
        raise QuoteUnavailable(f"Unexpected quote payload: {payload!r}")

    text = payload.get("q") or payload.get("quote") or payload.get("content")
    author = payload.get("a") or payload.get("author")
    if not isinstance(text, str) or not text.strip():
        raise QuoteUnavailable("Quote payload has no text")
    text = text.strip()
    if isinstance(author, str) and author.strip():
        return f"{text} - {author.strip()}"
    return text


class QuoteNotifier:
    """Fetches a motivational quote to show after a task is completed."""

    def __init__(self, url: Optional[str], timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_quote(self) -> str:
        if not self.url:
            raise QuoteUnavailable("No quote URL configured")
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise QuoteUnavailable(f"Quote request to {self.url} failed: {e}") from e
        return parse_quote(payload)

    def notify(self, task: Optional[Task] = None) -> str:
        """Returns a quote, or the fallback message when none can be fetched. Never raises."""
        try:
            return self.fetch_quote()
        except QuoteUnavailable as e:
            if self.url:
                logger.warning("Falling back to default message%s: %s",
                               f" for task {task.id}" if task else "", e)
            return DEGRADED_MESSAGE
