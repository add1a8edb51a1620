"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import clinics, courts, reservations, settings as settings_routes, tenants, time_slots
from app.core.config import settings
from app.core.database import init_database
from app.core.errors import DomainError
from app.services.scheduler import slot_sweep_scheduler

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting court reservation service")
    logger.info(f"Debug mode: {settings.DEBUG}")

    await init_database()

    if settings.SWEEP_ENABLED:
        await slot_sweep_scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down court reservation service")
    await slot_sweep_scheduler.stop()


app = FastAPI(
    title="Court Reservations",
    description="Multi-tenant court booking: generated time slots, reservations, open play and clinics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "details": "; ".join(messages),
            "validationErrors": messages,
        },
    )


# Include routers
app.include_router(tenants.router)
app.include_router(settings_routes.router)
app.include_router(courts.router)
app.include_router(time_slots.router)
app.include_router(reservations.router)
app.include_router(clinics.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "scheduler_running": slot_sweep_scheduler.running,
    }
