from dotenv import load_dotenv
load_dotenv()

import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from studio.core.config import settings
from studio.core.errors import StudioError
from studio.core.logger import logger, setup_logging
from studio.db.session import engine, SessionLocal
from studio.db.base import Base
from studio.db import models  # noqa: F401 (ensures models are registered)
from studio.db.seed import seed_admin
from studio.api.router import api_router

setup_logging()


#Seed the first admin account when the application starts
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT})")
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()
    yield
    logger.info("Shutting down")


#Create application instance
app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)


#Serve uploaded package images via static route
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.UPLOAD_DIR), name="media")


#configure CORS for the website frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


#Create all database tables on application startup
Base.metadata.create_all(bind=engine)


# =========================
# Error responses are always {"error": message}
# =========================
@app.exception_handler(StudioError)
async def studio_error_handler(request: Request, exc: StudioError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal Server Error"})

    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    missing = any(e.get("type") == "missing" for e in errors)

    return JSONResponse(
        status_code=400,
        content={
            "error": "Missing required fields" if missing else "Invalid request",
            "details": [
                {
                    "field": ".".join(str(part) for part in e.get("loc", ()) if part != "body"),
                    "message": e.get("msg"),
                }
                for e in errors
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


#Register all API routes under the main application
app.include_router(api_router)
