"""FastAPI application for the task backend.

Only one resource is exposed: /tasks (list/create/update/delete).
Domain errors raised by the store are translated here:
- ValidationError / request body errors -> 422 {"message", "errors"}
- NotFoundError / malformed path ids     -> 404 {"message"}
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasklist import __version__
from tasklist.config import Settings, get_settings
from tasklist.core.errors import NotFoundError, ValidationError
from tasklist.core.ports import TaskRepo
from tasklist.server.routes import router as tasks_router
from tasklist.tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Task not found."

_MESSAGE_BY_ERROR_TYPE = {
    "json_invalid": "The request body must be valid JSON.",
    "model_attributes_type": "The request body must be a JSON object.",
    "dict_type": "The request body must be a JSON object.",
}


def _request_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into {field: [message, ...]}."""
    out: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [p for p in err.get("loc", ()) if p != "body"]
        err_type = str(err.get("type", ""))
        if err_type in ("json_invalid", "model_attributes_type", "dict_type") or not loc:
            field = "body"
        else:
            field = str(loc[0])
        template = _MESSAGE_BY_ERROR_TYPE.get(err_type)
        msg = template.format(field=field) if template else str(err.get("msg", "Invalid value."))
        out.setdefault(field, []).append(msg)
    return out


def _validation_body(errors: dict[str, list[str]]) -> dict[str, Any]:
    return {"message": ValidationError(errors).message, "errors": errors}


def create_app(settings: Settings | None = None, store: TaskRepo | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use. If None, uses get_settings().
        store: Task store to serve. If None, a SQLite TaskStore is opened
            at settings.tasks_db_path.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()
    if store is None:
        store = TaskStore(settings.tasks_db_path)

    app = FastAPI(
        title=settings.app_name,
        description="To-do list backend",
        version=__version__,
    )
    app.state.settings = settings
    app.state.task_store = store

    app.include_router(tasks_router)

    cors_origins = list(getattr(settings, "cors_origins", []) or [])
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ValidationError)
    async def _handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.info("Validation failed %s %s: %s", request.method, request.url.path, exc.errors)
        return JSONResponse(status_code=422, content=_validation_body(exc.errors))

    @app.exception_handler(NotFoundError)
    async def _handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        logger.info("Not found %s %s", request.method, request.url.path)
        return JSONResponse(status_code=404, content={"message": NOT_FOUND_MESSAGE})

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # A non-integer id can never match a stored task.
        if any((err.get("loc") or ("",))[0] == "path" for err in exc.errors()):
            return JSONResponse(status_code=404, content={"message": NOT_FOUND_MESSAGE})
        errors = _request_errors(exc)
        logger.info("Request rejected %s %s: %s", request.method, request.url.path, errors)
        return JSONResponse(status_code=422, content=_validation_body(errors))

    logger.info("App ready name=%s db=%s", settings.app_name, getattr(store, "db_path", None))
    return app
