# file : /backend/main.py

import os
import logging
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from backend.database import close_db, connect_db
from backend.errors import NotFoundError, StoreError, ValidationError
from backend.models import ErrorResponse
from backend.routes import router, stations_router

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:8501").split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database connection on startup and close it on shutdown."""
    connect_db()
    yield
    close_db()


app = FastAPI(
    title = "Air Quality Measurements",
    description = "Store, query and evaluate air-quality measurements of monitoring stations.",
    version = "1.0",
    lifespan = lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(stations_router)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logging.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        problems.append(f"{location}: {error['msg']}" if location else error["msg"])
    message = "; ".join(problems)
    logging.info(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, exc.message)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logging.error(f"Store failure on {request.method} {request.url.path}: {exc.message}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logging.exception(f"Unexpected error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.get("/")
async def root():
    """API overview."""
    return {
        "name": app.title,
        "version": app.version,
        "documentation": {"swagger": "/docs", "redoc": "/redoc"},
        "endpoints": {
            "measurements": "GET|POST /api/airquality",
            "latest": "GET /api/airquality/latest",
            "latest_for_station": "GET /api/airquality/latest/{station_id}",
            "statistics": "GET /api/airquality/statistics",
            "measurement": "GET|PUT|DELETE /api/airquality/{id}",
            "stations": "GET|POST /api/stations",
            "station": "GET /api/stations/{station_id}",
        },
    }

if __name__ == "__main__" :
    uvicorn.run(app, host = "0.0.0.0", port = 8000, log_level="info")
