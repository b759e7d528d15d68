"""
FastAPI application for gzplan.

Provides REST API endpoints for:
- Business plan evaluation (capital, financing, revenue, costs, cash flow, compliance)
- Loan calculations (annuity payment, amortization schedule)
"""

import os
import logging
import traceback
from typing import Dict, Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gzplan import __version__
from gzplan.api.routes import loans, plans
from gzplan.utils.error_utils import GZPlanError, InvalidInputError

logger = logging.getLogger("gzplan")


# Create FastAPI application
app = FastAPI(
    title="GZPlan API",
    description="Gründungszuschuss business plan engine - financing, liquidity and compliance API",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# CORS configuration for the web frontend
_default_origins = "http://localhost:3000,http://localhost:5173,http://localhost:8501"
_cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _default_origins).split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Unreadable founder input that could not be defaulted."""
    logger.warning(f"Invalid input on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=422,
        content={
            "error": exc.message,
            "detail": exc.to_dict(),
            "type": type(exc).__name__,
        },
    )


@app.exception_handler(GZPlanError)
async def engine_error_handler(request: Request, exc: GZPlanError):
    logger.error(f"Engine error on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Calculation failed",
            "detail": exc.message,
            "type": type(exc).__name__,
        },
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    logger.error(traceback.format_exc())
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        },
    )


# Health check endpoint
@app.get("/health")
async def health_check() -> Dict[str, str]:
    """API health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "gzplan-api",
    }


# Include routers
app.include_router(plans.router, prefix="/api/plans", tags=["Plans"])
app.include_router(loans.router, prefix="/api/loans", tags=["Loans"])


# Root endpoint
@app.get("/")
async def root() -> Dict[str, Any]:
    """API root endpoint with service information."""
    return {
        "service": "GZPlan API",
        "version": __version__,
        "docs": "/api/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gzplan.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
