"""FastAPI application for the crime risk assessment backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from crimemap.config import get_settings
from crimemap.database import check_db_ready
from crimemap.rate_limit import limiter
from crimemap.routers import health_router, heatmap_router, incidents_router, risk_router
from crimemap.services.errors import RiskInputError, UpstreamServiceError
from crimemap.services.risk_levels import validate_bands

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("Starting crime risk backend...")

    validate_bands()

    # Verify database is ready
    try:
        await check_db_ready()
        logger.info("Database ready")
    except Exception as e:
        logger.error(f"Database not ready: {e}")
        raise

    if not settings.prediction_service_url:
        logger.warning("PREDICTION_SERVICE_URL not set, heatmap endpoints will return 502")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set, AI safety analysis is disabled")

    yield

    logger.info("Crime risk backend shut down")


# Create FastAPI app
app = FastAPI(
    title="Crime Risk API",
    description="Perimeter, route and grid crime risk assessment for Muntinlupa City",
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RiskInputError)
async def risk_input_exception_handler(request: Request, exc: RiskInputError):
    """Invalid coordinates, filters or routes."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(UpstreamServiceError)
async def upstream_exception_handler(request: Request, exc: UpstreamServiceError):
    """Prediction service or AI collaborator failures."""
    logger.error(f"Upstream service error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Include routers
app.include_router(health_router)
app.include_router(risk_router, prefix=settings.api_v1_prefix)
app.include_router(heatmap_router, prefix=settings.api_v1_prefix)
app.include_router(incidents_router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Crime Risk API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "crimemap.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
