# routers/tasks.py
import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST

from dependencies import get_notifier, get_store
from models import Task, TaskCreate, TaskUpdate
from quotes import QuoteNotifier
from storage import TaskStore
import task_manager
# Import the WebSocket manager from the ws router to notify it of changes
from routers.ws import manager as ws_manager

logger = logging.getLogger(__name__)

# --- Router Setup ---
router = APIRouter(
    prefix="/tasks",
    tags=["Task Management"],
)


# --- Helpers ---

def _parse_task_id(raw: Any) -> int:
    # Only whole numbers; int(1.9) would silently point at another task.
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().isdecimal():
        return int(raw.strip())
    raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="A numeric 'id' is required.")


def _envelope(message: str, task: Task) -> Dict[str, Any]:
    return {"message": message, "updatedTask": task.model_dump(by_alias=True)}


async def announce_completion(task: Task, notifier: QuoteNotifier):
    """
    Runs after the completion response has been sent. The quote lookup is
    best effort: any failure ends up in the log, never in the response.
    """
    try:
        message = await asyncio.to_thread(notifier.notify, task)
        await ws_manager.broadcast_message({"type": "quote", "task_id": task.id, "message": message})
    except Exception:
        logger.exception("Completion notification for task %s failed", task.id)


# --- Endpoints ---

@router.get("", response_model=List[Task])
async def get_tasks(store: TaskStore = Depends(get_store)):
    """Get the list of all tasks in stored order."""
    return task_manager.list_tasks(store)


@router.get("/grouped", response_model=Dict[str, List[Task]])
async def get_tasks_grouped(store: TaskStore = Depends(get_store)):
    """Get all tasks grouped by tag, for display."""
    return task_manager.group_by_tag(task_manager.list_tasks(store))


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: int, store: TaskStore = Depends(get_store)):
    return task_manager.get_task(store, task_id)


@router.post("", status_code=201, response_model=Task)
async def create_task(data: Optional[TaskCreate] = None, store: TaskStore = Depends(get_store)):
    """Creates a task. etiqueta, descripcion and fecha_limite are required."""
    task = task_manager.create_task(store, data or TaskCreate())
    await ws_manager.broadcast_tasks(store.load_all())
    return task


@router.put("/{task_id}")
async def update_task(task_id: int, data: Optional[TaskUpdate] = None, store: TaskStore = Depends(get_store)):
    """Partially updates a task; fields left out of the body keep their values."""
    task = task_manager.update_task(store, task_id, data or TaskUpdate())
    await ws_manager.broadcast_tasks(store.load_all())
    return _envelope("Task updated", task)


@router.post("/complete/{task_id}")
async def complete_task(
    task_id: int,
    background_tasks: BackgroundTasks,
    store: TaskStore = Depends(get_store),
    notifier: QuoteNotifier = Depends(get_notifier),
):
    """Marks a task as completed and fetches a quote in the background."""
    task = task_manager.complete_task(store, task_id)
    await ws_manager.broadcast_tasks(store.load_all())
    background_tasks.add_task(announce_completion, task, notifier)
    return _envelope("Task completed", task)


@router.post("/delete")
async def delete_task_form(request: Request, store: TaskStore = Depends(get_store)):
    """
    Deletes the task named by `id` in the request body.
    Form posts are redirected back to the task list; JSON posts get a JSON reply.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Invalid JSON body.")
        task_id = _parse_task_id(body.get("id") if isinstance(body, dict) else None)
        as_form = False
    else:
        form = await request.form()
        task_id = _parse_task_id(form.get("id"))
        as_form = True

    task_manager.delete_task(store, task_id)
    await ws_manager.broadcast_tasks(store.load_all())
    if as_form:
        return RedirectResponse(url=router.prefix, status_code=HTTP_303_SEE_OTHER)
    return {"message": f"Task {task_id} has been deleted."}


@router.delete("/{task_id}")
async def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    task_manager.delete_task(store, task_id)
    await ws_manager.broadcast_tasks(store.load_all())
    return {"message": f"Task {task_id} has been deleted."}
