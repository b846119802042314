import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import check_connection
from routers import leases_router, payments_router
from services.errors import (
    PaymentServiceError,
    LeaseNotFound,
    PaymentNotFound,
    PropertyNotFound,
    PropertyUnavailable,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# App instance
app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _status_for(exc: PaymentServiceError) -> int:
    if isinstance(exc, (LeaseNotFound, PaymentNotFound, PropertyNotFound)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PropertyUnavailable):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ValueError):
        return status.HTTP_400_BAD_REQUEST
    # LookupFailed, PersistenceFailure
    return status.HTTP_503_SERVICE_UNAVAILABLE


@app.exception_handler(PaymentServiceError)
async def payment_service_error_handler(request: Request, exc: PaymentServiceError):
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "InternalServerError", "detail": "Internal server error"},
    )


@app.get("/health")
def health():
    database_ok = check_connection()
    return {"status": "ok" if database_ok else "degraded", "database": database_ok}


app.include_router(leases_router)
app.include_router(payments_router)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
