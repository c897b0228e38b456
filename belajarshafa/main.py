# belajarshafa/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from belajarshafa import models  # noqa
from belajarshafa.api.v1.endpoints import (
    attendance,
    auth,
    categories,
    classes,
    courses,
    enrollments,
    health,
    materials,
    organizations,
    progress,
    sessions,
    topics,
    upload,
    users,
)
from belajarshafa.core.config import settings
from belajarshafa.core.exceptions import AppError
from belajarshafa.core.logging_config import setup_logging
from belajarshafa.db.init_db import init_db

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info(f"{settings.PROJECT_NAME} started")


for router in (
    auth.router,
    users.router,
    organizations.router,
    classes.router,
    sessions.router,
    attendance.router,
    categories.router,
    courses.router,
    topics.router,
    materials.router,
    enrollments.router,
    progress.router,
    upload.router,
    health.router,
):
    app.include_router(router, prefix=settings.API_PREFIX)
