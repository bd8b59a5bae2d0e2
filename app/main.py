from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from app.db.base import get_db
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.routers import analytics as analytics_router
from app.routers import dashboard as dashboard_router
from app.routers import erp as erp_router
from app.routers import mentors as mentors_router
from app.routers import risk as risk_router
from app.routers import skills as skills_router
from app.routers import students as students_router
from app.routers import users as users_router
from app.core.errors import (
    PulseException,
    pulse_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Student Pulse API",
    description=(
        "**Student well-being and academic risk**\n\n"
        "Daily check-ins, attendance and marks feed a deterministic risk engine, "
        "a College Life Balance Meter and mood × academics correlations. "
        "An AI predictor explains risk, with a rule-based fallback.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(PulseException, pulse_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(students_router.router)
app.include_router(dashboard_router.router)
app.include_router(risk_router.router)
app.include_router(analytics_router.router)
app.include_router(users_router.router)
app.include_router(skills_router.router)
app.include_router(mentors_router.router)
app.include_router(erp_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
