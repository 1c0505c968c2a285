# routers/ws.py
import logging
from typing import Any, Dict, List, Sequence

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from dependencies import get_store
from models import Task
from storage import TaskStore

logger = logging.getLogger(__name__)


def tasks_payload(tasks: Sequence[Task]) -> Dict[str, Any]:
    return {
        "type": "tasks_update",
        "payload": [task.model_dump(by_alias=True) for task in tasks],
    }


class ConnectionManager:
    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def send_message(self, websocket: WebSocket, message: Dict[str, Any]):
        try:
            await websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError):
            self.disconnect(websocket)

    async def broadcast_message(self, message: Dict[str, Any]):
        # Create a copy for safe iteration
        for websocket in list(self.active_connections):
            await self.send_message(websocket, message)

    async def broadcast_tasks(self, tasks: Sequence[Task]):
        if not self.active_connections:
            return
        await self.broadcast_message(tasks_payload(tasks))


manager = ConnectionManager()
router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, store: TaskStore = Depends(get_store)):
    await manager.connect(websocket)
    # Send initial state to the newly connected client
    await manager.send_message(websocket, tasks_payload(store.load_all()))
    try:
        while True:
            # Keep connection alive. We are not expecting any client messages.
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.info("Client disconnected from WebSocket.")
