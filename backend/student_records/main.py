"""
Student Records Backend - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Renders domain and validation errors as {"error", "code", "success"} payloads
5. Registers the record and auth routers
6. Optionally serves the frontend from STATIC_DIR

The application follows a modular architecture:
- routes/: API endpoint handlers
- models/: pydantic request/response schemas
- services/: record store, auth, Telegram verification relay
- database.py: shared store/service instances (FastAPI dependencies)
- logging_config.py: Structured logging configuration
"""

import os
import time
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from student_records import config
from student_records.errors import StudentRecordsError
from student_records.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from student_records.routes import students, auth

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")

app = FastAPI(
    title="Student Records",
    description=(
        "Student account records with JSON file persistence, login, "
        "registration and Telegram-based identity verification."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
#
# Generates a UUID per incoming request, stores it in a context
# variable for every log entry, returns it in X-Request-ID and
# logs request start/end with latency.
# ──────────────────────────────────────────────────────────────
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    req_id = generate_request_id()
    request_id_var.set(req_id)

    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", "")
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


@app.exception_handler(StudentRecordsError)
async def student_records_error_handler(request: Request, exc: StudentRecordsError):
    log_with_context(logger, "WARNING",
        f"{request.method} {request.url.path} failed: {exc.code}",
        extra_data={"status_code": exc.status_code, "error": exc.message})
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = "{}: {}".format(location, first.get("msg", "invalid value")) if location else "Invalid request"
    log_with_context(logger, "WARNING",
        f"{request.method} {request.url.path} rejected: invalid_request",
        extra_data={"status_code": 400, "errors": len(errors), "error": message})
    return JSONResponse(
        status_code=400,
        content={"error": message, "code": "invalid_request", "success": False}
    )


# ──────────────────────────────────────────────────────────────
# Register API routes
# ──────────────────────────────────────────────────────────────
app.include_router(students.router, tags=["Students"])
app.include_router(auth.router, tags=["Auth"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for container probes."""
    return {"status": "healthy", "service": "student-records", "version": "1.0.0"}


# Mounted last so API routes take precedence over same-named files
if config.STATIC_DIR and os.path.isdir(config.STATIC_DIR):
    app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    log_with_context(logger, "INFO", "Server running on port {}".format(config.PORT),
                     extra_data={"bot_service_url": config.BOT_SERVICE_URL,
                                 "students_file": config.STUDENTS_FILE})
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)
