import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rental_availability.api.deps import engine
from rental_availability.api.routers.availability import router as availability_router
from rental_availability.api.routers.bookings import router as bookings_router
from rental_availability.api.routers.health import router as health_router
from rental_availability.api.schemas.availability import AvailabilityConflictResponse
from rental_availability.config import get_settings
from rental_availability.domain.errors import (
    BookingNotFoundError,
    ConflictError,
    DomainError,
    InvalidBookingStatusError,
    InvalidRangeError,
    OptimisticLockError,
    RuleNotEditableError,
    RuleNotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from rental_availability.infrastructure.db.tables import metadata

# Configure structured logging
logging.basicConfig(
    level=get_settings().log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[DomainError], int] = {
    InvalidRangeError: 400,
    ValidationError: 400,
    RuleNotFoundError: 404,
    BookingNotFoundError: 404,
    ConflictError: 409,
    InvalidBookingStatusError: 409,
    RuleNotEditableError: 409,
    OptimisticLockError: 409,
    StoreUnavailableError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB tables (for dev/demo purposes)
    if not get_settings().use_in_memory:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    yield
    await engine.dispose()

app = FastAPI(
    title="Listing Availability API",
    version="0.1.0",
    lifespan=lifespan
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        400,
    )
    content: dict = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, ConflictError):
        content["conflicts"] = [
            AvailabilityConflictResponse.model_validate(conflict).model_dump(mode="json", by_alias=True)
            for conflict in exc.conflicts
        ]
    log = logger.error if status_code >= 500 else logger.info
    log(
        "Domain error",
        extra={"code": exc.code, "path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=status_code, content=content)


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists."
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(availability_router, prefix="/api/v1", tags=["Availability"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
