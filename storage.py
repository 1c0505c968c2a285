# storage.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Union

from pydantic import ValidationError

from models import Task

logger = logging.getLogger(__name__)


def _file_mode(path: Path) -> int:
    """Mode for a rewritten task file: keep the existing one, else the umask default."""
    try:
        return path.stat().st_mode & 0o777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class StoreUnavailable(Exception):
    """Raised when the task file cannot be written."""


class TaskStore:
    """
    Full read / full write persistence for the task list.

    Every mutation is a complete load -> modify -> save cycle; there is no
    locking and the last writer wins.
    """

    def load_all(self) -> List[Task]:
        raise NotImplementedError

    def save_all(self, tasks: List[Task]) -> None:
        raise NotImplementedError

    def initialize(self) -> None:
        """Prepare the backing storage. No-op by default."""


class JsonFileTaskStore(TaskStore):
    def __init__(self, path: Union[str, Path] = "tasks.json"):
        self.path = Path(path)

    def load_all(self) -> List[Task]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            logger.warning("Could not read %s, treating store as empty: %s", self.path, e)
            return []

        # Older files hold a bare list instead of {"tasks": [...]}
        raw_tasks = document.get("tasks", []) if isinstance(document, dict) else document
        if not isinstance(raw_tasks, list):
            logger.warning("Unexpected layout in %s, treating store as empty", self.path)
            return []
        try:
            return [Task.model_validate(item) for item in raw_tasks]
        except ValidationError as e:
            logger.warning("Invalid task record in %s, treating store as empty: %s", self.path, e)
            return []

    def save_all(self, tasks: List[Task]) -> None:
        document = {"tasks": [task.model_dump(by_alias=True) for task in tasks]}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=4, ensure_ascii=False)
            os.chmod(tmp_name, _file_mode(self.path))
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreUnavailable(f"Could not write tasks to {self.path}: {e}") from e

    def initialize(self) -> None:
        if not self.path.exists():
            self.save_all([])
            logger.info("Created empty task file at %s", self.path)


class InMemoryTaskStore(TaskStore):
    """Keeps the task list in process; used by tests and throwaway runs."""

    def __init__(self, tasks: Union[List[Task], None] = None):
        self._tasks = [task.model_copy() for task in tasks or []]

    def load_all(self) -> List[Task]:
        return [task.model_copy() for task in self._tasks]

    def save_all(self, tasks: List[Task]) -> None:
        self._tasks = [task.model_copy() for task in tasks]
