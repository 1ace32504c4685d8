# src/taskboard/api/app.py

"""
HTTP surface over a TaskStore.

Endpoints:
    GET    /tasks        -> 200, JSON array (never null)
    POST   /tasks        -> 201 created task | 400 {"error": ...}
    PUT    /tasks/{id}   -> 200 updated task | 400 | 404 {"error": ...}
    DELETE /tasks/{id}   -> 204 empty body   | 404 {"error": ...}

The store is injected by create_app(); handlers never build or look up a
backend themselves.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import Settings
from ..core.ports import TaskStore
from ..tasks.task_errors import NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "Accept", "X-Requested-With", "Origin"]


# ---- request models ----

class TaskPayload(BaseModel):
    """Body of POST/PUT. Missing, null and "" all mean "not supplied"."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


# ---- helpers ----

def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _describe_validation(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = str(err.get("msg", "invalid value"))
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "invalid request body: " + ("; ".join(parts) or "malformed JSON")


def get_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _on_validation(_request: Request, exc: ValidationError) -> JSONResponse:
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(NotFoundError)
    async def _on_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return error_response(str(exc), status.HTTP_404_NOT_FOUND)

    @app.exception_handler(PersistenceError)
    async def _on_persistence(_request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Storage failure: %s", exc)
        return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(RequestValidationError)
    async def _on_bad_body(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(_describe_validation(exc), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def _on_http(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def _on_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response("internal error", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ---- app factory ----

def create_app(store: TaskStore, settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI app around an already-initialized store."""
    title = settings.app_name if settings is not None else "taskboard"
    origins = settings.cors_origins if settings is not None else ["*"]

    app = FastAPI(title=title, version=__version__)
    app.state.task_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )
    _install_error_handlers(app)

    @app.get("/tasks")
    def list_tasks(store: TaskStore = Depends(get_store)) -> list[dict[str, Any]]:
        return [t.to_dict() for t in store.get_all()]

    @app.post("/tasks", status_code=status.HTTP_201_CREATED)
    def create_task(payload: TaskPayload, store: TaskStore = Depends(get_store)) -> dict[str, Any]:
        task = store.create(
            payload.title or "",
            payload.description or "",
            payload.status or "",
        )
        logger.info("Created task id=%s", task.id)
        return task.to_dict()

    @app.put("/tasks/{task_id}")
    def update_task(
        task_id: str,
        payload: TaskPayload,
        store: TaskStore = Depends(get_store),
    ) -> dict[str, Any]:
        task = store.update(
            task_id,
            payload.title or "",
            payload.description or "",
            payload.status or "",
        )
        logger.info("Updated task id=%s", task.id)
        return task.to_dict()

    @app.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_task(task_id: str, store: TaskStore = Depends(get_store)) -> Response:
        store.delete(task_id)
        logger.info("Deleted task id=%s", task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app
