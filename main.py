# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR
)

from config import Settings, get_settings
from logging_setup import setup_logging
from quotes import QuoteNotifier
from routers import quote, tasks, ws
from storage import JsonFileTaskStore, StoreUnavailable, TaskStore
from task_manager import InvalidInput, NotFound

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[TaskStore] = None,
    notifier: Optional[QuoteNotifier] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Builds the FastAPI application around an injected task store and quote
    notifier. Anything not supplied is built from the settings.
    """
    settings = settings or get_settings()
    if store is None:
        store = JsonFileTaskStore(settings.tasks_file)
    if notifier is None:
        notifier = QuoteNotifier(settings.quote_url, timeout=settings.quote_timeout)

    # --- App Lifecycle (Lifespan) ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        # Create the tasks file if it doesn't exist
        app.state.store.initialize()
        yield
        logger.info("Application shutting down...")

    app = FastAPI(
        title="Task List",
        description="A small to-do list API that keeps its tasks in a JSON file.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Error Handling ---
    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error("Task store write failed: %s", exc)
        return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)})

    # --- Include API Routers ---
    app.include_router(tasks.router)
    app.include_router(quote.router)
    app.include_router(ws.router)

    return app


app = create_app()


def serve(settings: Optional[Settings] = None):
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, log_config=None)


# --- Main Entry Point ---
if __name__ == "__main__":
    serve()
