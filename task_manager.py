# task_manager.py
import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from models import Task, TaskCreate, TaskUpdate
from storage import TaskStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "tag": "etiqueta",
    "description": "descripcion",
    "due_date": "fecha_limite",
}


class TaskError(Exception):
    """Base class for errors reported back to the caller."""


class InvalidInput(TaskError):
    pass


class NotFound(TaskError):
    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _find_index(tasks: Sequence[Task], task_id: int) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise NotFound(task_id)


def next_task_id(tasks: Sequence[Task]) -> int:
    """Highest existing id plus one, so ids freed by deletion are never handed out twice."""
    return max((task.id for task in tasks), default=0) + 1


def list_tasks(store: TaskStore) -> List[Task]:
    return store.load_all()


def group_by_tag(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """
    Groups tasks by tag for display.
    Groups appear in the order their tag is first seen, and tasks keep their
    stored order within each group. The input sequence is not modified.
    """
    groups: Dict[str, List[Task]] = {}
    for task in tasks:
        groups.setdefault(task.tag, []).append(task)
    return groups


def get_task(store: TaskStore, task_id: int) -> Task:
    tasks = store.load_all()
    return tasks[_find_index(tasks, task_id)]


def create_task(store: TaskStore, data: TaskCreate) -> Task:
    """Validates the input, assigns the next id and persists the new task."""
    missing = [
        wire_name
        for field, wire_name in REQUIRED_FIELDS.items()
        if _is_blank(getattr(data, field))
    ]
    if missing:
        raise InvalidInput(f"Missing required fields: {', '.join(missing)}")

    tasks = store.load_all()
    task = Task(
        id=next_task_id(tasks),
        tag=data.tag,
        description=data.description,
        created_at=date.today().isoformat(),
        due_date=data.due_date,
        completed=False,
    )
    tasks.append(task)
    store.save_all(tasks)
    logger.info("Created task %s (%s)", task.id, task.tag)
    return task


def update_task(store: TaskStore, task_id: int, data: TaskUpdate) -> Task:
    """
    Applies a partial update. Only the fields present in `data` are
    overwritten; everything else keeps its stored value.
    """
    changes = data.changes()
    blank = [
        REQUIRED_FIELDS[field]
        for field in REQUIRED_FIELDS
        if field in changes and _is_blank(changes[field])
    ]
    if blank:
        raise InvalidInput(f"Fields cannot be empty: {', '.join(blank)}")

    tasks = store.load_all()
    index = _find_index(tasks, task_id)
    updated = tasks[index].model_copy(update=changes)
    tasks[index] = updated
    store.save_all(tasks)
    logger.info("Updated task %s: %s", task_id, ", ".join(sorted(changes)) or "no changes")
    return updated


def complete_task(store: TaskStore, task_id: int) -> Task:
    """Marks a task as completed. Calling it again on a completed task is harmless."""
    tasks = store.load_all()
    index = _find_index(tasks, task_id)
    completed = tasks[index].model_copy(update={"completed": True})
    tasks[index] = completed
    store.save_all(tasks)
    logger.info("Completed task %s", task_id)
    return completed


def delete_task(store: TaskStore, task_id: int) -> Task:
    tasks = store.load_all()
    index = _find_index(tasks, task_id)
    removed = tasks.pop(index)
    store.save_all(tasks)
    logger.info("Deleted task %s", task_id)
    return removed
