"""
SurgiEval — FastAPI Application

Головний файл FastAPI додатку.

Запуск:
    uvicorn surgi_eval.api.app:app --reload --host 0.0.0.0 --port 8000

    або:

    python scripts/run_api.py
"""

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from surgi_eval import __version__
from surgi_eval.config import setup_logging
from surgi_eval.exceptions import (
    IncompleteSessionError,
    InvalidTransitionError,
    ReportError,
    ScoreOverrideError,
    SurgiEvalError,
    UnknownChecklistItemError,
)

from .config import config
from .dependencies import session_manager
from .routes import (
    health_router,
    topics_router,
    sessions_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager — логування при старті, закриття сесій при зупинці.
    """
    setup_logging(config.log_level, logs_dir=config.logs_dir)

    print("=" * 60)
    print("🏥 SurgiEval API Starting...")
    print("=" * 60)

    generation = session_manager.app_config.generation
    if generation.resolve_api_key():
        print(f"✅ Generation model: {generation.model}")
    else:
        print(f"⚠️ {generation.api_key_env} not set: scenario generation will fail, feedback falls back to local score")

    print("=" * 60)
    print(f"📍 Swagger UI: http://{config.host}:{config.port}/docs")
    print(f"📍 ReDoc: http://{config.host}:{config.port}/redoc")
    print("=" * 60)

    yield

    # Cleanup при зупинці
    session_manager.close_all()
    print("🛑 SurgiEval API Stopping...")


# Створюємо додаток
app = FastAPI(
    title=config.api_title,
    description=config.api_description,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


# Middleware для логування запитів
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time

    # Логуємо тільки API запити
    if request.url.path.startswith(config.api_prefix):
        logger.info(
            "%s %s -> %d (%.1fms)",
            request.method, request.url.path, response.status_code, process_time * 1000,
        )

    return response


# ============================================================
# Обробники помилок ядра
# ============================================================

def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    logger.info("Rejected %s: %s", request.url.path, exc)
    return _error(409, exc)


@app.exception_handler(ScoreOverrideError)
async def score_override_handler(request: Request, exc: ScoreOverrideError):
    return _error(422, exc)


@app.exception_handler(UnknownChecklistItemError)
async def unknown_item_handler(request: Request, exc: UnknownChecklistItemError):
    return _error(422, exc)


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError):
    return _error(400, exc)


@app.exception_handler(IncompleteSessionError)
async def incomplete_session_handler(request: Request, exc: IncompleteSessionError):
    return _error(400, exc)


@app.exception_handler(SurgiEvalError)
async def surgi_eval_error_handler(request: Request, exc: SurgiEvalError):
    logger.warning("Unhandled domain error on %s: %s", request.url.path, exc)
    return _error(400, exc)


# Глобальний обробник помилок
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if config.debug else None
        }
    )


# Підключаємо роутери
app.include_router(health_router)
app.include_router(topics_router, prefix=config.api_prefix)
app.include_router(sessions_router, prefix=config.api_prefix)
