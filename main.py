import json
import logging
import re
import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from database import ScheduleStore
from logging_setup import setup_logging
from schemas import MAX_DAY, MIN_DAY, UpdateDayTasksRequest, UpdateTasksRequest
from seed import seed_sample_data

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"

# Storage failures and stored documents that no longer validate.
STORE_ERRORS = (PyMongoError, ValidationError)

_DAY_RE = re.compile(r"[+-]?[0-9]+")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

router = APIRouter()


# -----------------------------
# Helpers
# -----------------------------
def get_store(request: Request) -> ScheduleStore:
    return request.app.state.store


def parse_day(raw: str) -> int:
    if not _DAY_RE.fullmatch(raw):
        raise HTTPException(status_code=400, detail="Invalid day format")
    day = int(raw)
    if day < MIN_DAY or day > MAX_DAY:
        raise HTTPException(status_code=400, detail="Day must be between 1 and 7 (1=Sunday, 7=Saturday)")
    return day


def log_payload(request: Request, payload: Any) -> Any:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("[GET] %s response:\n%s", request.url.path, json.dumps(payload, ensure_ascii=False, indent=2))
    return payload


# -----------------------------
# Basic
# -----------------------------
@router.get("/")
def read_root(store: ScheduleStore = Depends(get_store)):
    return {"message": "Weekly task store running", "database": "available" if store.ping() else "unavailable"}


@router.get("/api/health")
def health(store: ScheduleStore = Depends(get_store)):
    return {"status": "ok", "database": store.ping()}


# -----------------------------
# Schedules
# -----------------------------
@router.get("/api/users")
def list_users(request: Request, store: ScheduleStore = Depends(get_store)):
    try:
        schedules = store.list_schedules()
    except STORE_ERRORS:
        logger.exception("Failed to list schedules")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
    return log_payload(request, {s.name: {"tasks": s.tasks} for s in schedules})


@router.post("/api/users")
def update_user_tasks(req: UpdateTasksRequest, request: Request, store: ScheduleStore = Depends(get_store)):
    if not req.name:
        raise HTTPException(status_code=400, detail="Field 'name' is required")

    logger.info("[POST] %s modifications: %s", request.url.path, req.model_dump_json(exclude_none=True))

    try:
        schedule = store.replace_schedule(req.name, req.tasks)
    except STORE_ERRORS:
        logger.exception("Failed to update schedule for %r", req.name)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
    return {"message": "User tasks updated", "user": schedule.model_dump()}


@router.get("/api/users/{name}")
def get_user_tasks(name: str, request: Request, store: ScheduleStore = Depends(get_store)):
    try:
        schedule = store.get_schedule(name)
    except STORE_ERRORS:
        logger.exception("Failed to load schedule for %r", name)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
    if schedule is None:
        raise HTTPException(status_code=404, detail="User not found")
    return log_payload(request, schedule.model_dump())


@router.get("/api/users/{name}/day/{day}")
def get_user_day_tasks(name: str, day: str, request: Request, store: ScheduleStore = Depends(get_store)):
    day_num = parse_day(day)
    try:
        schedule = store.get_schedule(name)
    except STORE_ERRORS:
        logger.exception("Failed to load day %s for %r", day_num, name)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
    if schedule is None:
        raise HTTPException(status_code=404, detail="User not found")
    return log_payload(request, {"name": schedule.name, "day": day_num, "tasks": schedule.day_tasks(day_num)})


@router.post("/api/users/{name}/day/{day}")
def update_user_day_tasks(
    name: str,
    day: str,
    req: UpdateDayTasksRequest,
    request: Request,
    store: ScheduleStore = Depends(get_store),
):
    day_num = parse_day(day)
    if req.tasks is None:
        raise HTTPException(status_code=400, detail="Field 'tasks' must be an array")

    logger.info(
        "[POST] %s modifications: %s",
        request.url.path,
        json.dumps({"name": name, "day": day_num, "tasks": req.tasks}, ensure_ascii=False),
    )

    try:
        tasks = store.replace_day(name, day_num, req.tasks)
    except STORE_ERRORS:
        logger.exception("Failed to update day %s for %r", day_num, name)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)
    return {"message": "Day tasks updated", "user": {"name": name, "day": day_num, "tasks": tasks}}


# -----------------------------
# App factory
# -----------------------------
def create_app(store: Optional[ScheduleStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.store is None
        if owned:
            setup_logging(settings.log_level)
            app.state.store = ScheduleStore.connect(
                settings.database_url, settings.database_name, settings.collection_name
            )
            if settings.seed_sample_data:
                seed_sample_data(app.state.store)
        try:
            yield
        finally:
            if owned:
                app.state.store.close()
                app.state.store = None

    app = FastAPI(title="Weekly Task Store", version="1.0.0", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        logger.info("[REQ] %s %s from %s", request.method, request.url.path, client)
        if request.method == "OPTIONS":
            response = Response(status_code=204, headers=CORS_HEADERS)
        else:
            response = await call_next(request)
        logger.info(
            "[RES] %s %s -> %d (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code < 500:
            logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        logger.info("%s %s -> 400: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
