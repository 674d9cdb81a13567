"""
CSOB Gateway Backend - FastAPI Application

Exposes payment/init payload preparation over HTTP.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import os

from .config import settings
from .exceptions import GatewayError
from .api.payments import router as payments_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs the merchant configuration in use (never key passphrases).
    """
    logger.info("Starting CSOB gateway backend server...")
    logger.info(f"Merchant: {settings.merchant_id or '(not configured)'}")
    logger.info(f"Gateway timezone: {settings.gateway_timezone}")

    if not settings.return_url:
        logger.warning("No default return URL configured; every request must carry its own")
    if not settings.private_key_file or not os.path.exists(settings.private_key_file):
        logger.warning(f"Private key file not found: {settings.private_key_file!r}; signing will fail")

    logger.info("Server startup complete")

    yield

    logger.info("Shutting down CSOB gateway backend server...")


app = FastAPI(
    title="CSOB Gateway API",
    description="Signed payment/init payloads for the CSOB card gateway",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    """
    Handle payment request errors with standardized response format.

    Status code comes from the error class: 400 for caller mistakes,
    500 for configuration and signing failures.
    """
    logger.warning(
        f"Gateway error: {exc.error_code} - {exc.message}",
        extra={"details": exc.details}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """
    Handle validation errors with user-friendly messages.

    Used for field validation failures on the request builder.
    """
    logger.warning(f"Validation error: {str(exc)}")

    return JSONResponse(
        status_code=400,
        content={
            "error_code": "validation_error",
            "message": str(exc),
            "details": {}
        }
    )


# Health check endpoint
@app.get("/api/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        Server status and version information
    """
    return {
        "status": "healthy",
        "version": "0.1.0",
        "merchant_configured": bool(settings.merchant_id),
    }


app.include_router(payments_router, prefix="/api", tags=["Payments"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "csob_gateway.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
