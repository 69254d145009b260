"""
FastAPI application entrypoint.

Wires configuration, logging, the database, the Piston client and the
WebSocket broadcast hub into one app, and registers the API routers.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from arena import auth
from arena.config import get_settings
from arena.db import engine, init_db
from arena.judge.piston import PistonClient
from arena.logging_conf import setup_logging
from arena.models import User
from arena.realtime import ConnectionManager
from arena.realtime import router as realtime_router
from arena.routers import leaderboard, problems, submissions, users
from arena.seed import seed_problems

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(
        sentry_dsn=settings.sentry_dsn,
        sentry_environment=settings.sentry_environment,
        sentry_traces_sample_rate=settings.sentry_traces_sample_rate,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )
    logger.info(f"Starting {settings.app_name}...")

    init_db()
    with Session(engine) as session:
        auth.init_admin(session, settings)
        if settings.seed_sample_problem:
            seed_problems(session)

    app.state.executor = PistonClient(
        settings.piston_url,
        timeout=settings.piston_timeout,
        compile_timeout_ms=settings.compile_timeout_ms,
        run_timeout_ms=settings.run_timeout_ms,
    )
    app.state.connections = ConnectionManager()
    logger.info(f"{settings.app_name} started")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await app.state.executor.aclose()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(problems.router)
    app.include_router(submissions.router)
    app.include_router(leaderboard.router)
    app.include_router(users.router)
    app.include_router(realtime_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        return JSONResponse({"message": error["msg"], "field": field}, status_code=400)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse({"message": "Internal Server Error"}, status_code=500)

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, user: Optional[User] = Depends(auth.get_current_user)):
        return templates.TemplateResponse(request, "index.html", {"user": user})

    @app.get("/leaderboard", response_class=HTMLResponse)
    def leaderboard_page(request: Request, user: Optional[User] = Depends(auth.get_current_user)):
        return templates.TemplateResponse(request, "leaderboard.html", {"user": user})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("arena.main:app", host="0.0.0.0", port=8000, reload=True)
