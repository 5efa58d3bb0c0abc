"""FastAPI application exposing the job store over HTTP/JSON."""

from typing import Any, List

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .errors import JobTrackerError
from .logger import get_logger
from .schema import Status
from .store import JobStore

logger = get_logger()

ROOT_MESSAGE = "Job tracker API is running"


class JobOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    company: str
    status: Status


class MessageOut(BaseModel):
    message: str


def _store(request: Request) -> JobStore:
    return request.app.state.store


def create_app(store: JobStore) -> FastAPI:
    """Build the API around an already opened store."""
    app = FastAPI(
        title="Job Tracker API",
        description="Job applications tracked across Kanban status columns",
        version=__version__,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(JobTrackerError)
    async def job_tracker_error_handler(request: Request, exc: JobTrackerError):
        logger.warning(
            "Request failed",
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            method=request.method,
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed JSON and non-object bodies are client errors, not 422s
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return ROOT_MESSAGE

    @app.get("/jobs", response_model=List[JobOut])
    def list_jobs(request: Request):
        return _store(request).list_jobs()

    @app.post("/jobs", response_model=JobOut, status_code=201)
    def create_job(request: Request, payload: Any = Body(...)):
        return _store(request).create_job(payload)

    @app.patch("/jobs/{job_id}", response_model=JobOut)
    def update_job(job_id: str, request: Request, payload: Any = Body(...)):
        return _store(request).update_job(job_id, payload)

    @app.delete("/jobs/{job_id}", response_model=MessageOut)
    def delete_job(job_id: str, request: Request):
        _store(request).delete_job(job_id)
        return {"message": "Job deleted"}

    return app
