from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.api.routes import search
from app.config import settings
from app.errors import StreamGenieError
from app.models.schemas import HealthResponse

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type", "x-region"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("StreamGenie search service starting")
    yield
    logger.info("StreamGenie search service stopped")


app = FastAPI(
    title="StreamGenie",
    description="Where-to-watch search for movies, TV and live events",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=CORS_ALLOW_HEADERS,
)

app.include_router(search.router)


@app.exception_handler(StreamGenieError)
async def streamgenie_error_handler(request: Request, exc: StreamGenieError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.method} {request.url.path}: {exc.errors()}")
    details = [
        {"loc": error.get("loc"), "msg": error.get("msg")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": details},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error in {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error occurred"})


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", service="streamgenie")
