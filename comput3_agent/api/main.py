"""FastAPI application setup and configuration."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from comput3_agent.agent.plugin import Comput3Plugin
from comput3_agent.agent.runtime import AgentRuntime
from comput3_agent.api.middleware.error_handler import (
    missing_credential_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from comput3_agent.api.middleware.logging import LoggingMiddleware, setup_logging
from comput3_agent.api.routes import actions, health
from comput3_agent.constants import SERVICE_VERSION
from comput3_agent.services.comput3_client import MissingCredentialError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events.
    """
    # Startup
    setup_logging(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "json"),
    )

    runtime = AgentRuntime.from_env()
    plugin = Comput3Plugin()
    await plugin.init(runtime)

    app.state.runtime = runtime
    app.state.plugin = plugin

    yield

    # Shutdown
    await runtime.close()


# Create FastAPI application
app = FastAPI(
    title="Comput3 Workload Agent",
    description="Manage Comput3 GPU workloads through natural language commands",
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ========== CORS Configuration ==========

# Get allowed origins from environment
allowed_origins = os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

# ========== Custom Middleware ==========

app.add_middleware(LoggingMiddleware)

# ========== Exception Handlers ==========

app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(MissingCredentialError, missing_credential_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ========== Route Registration ==========

app.include_router(health.router)
app.include_router(actions.router)

# ========== Root Endpoint ==========


@app.get(
    "/",
    tags=["root"],
    summary="API root",
    description="Returns API information and available endpoints",
)
async def root() -> dict:
    """API root endpoint.

    Returns:
        API information and version
    """
    return {
        "service": "Comput3 Workload Agent",
        "version": SERVICE_VERSION,
        "description": "Launch, stop and inspect Comput3 GPU workloads through natural language",
        "documentation": {
            "openapi": "/openapi.json",
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": {
            "liveness": "/v1/liveness",
            "readiness": "/v1/readiness",
            "health": "/v1/health",
        },
        "actions": "/v1/actions",
    }


# ========== Development Server ==========

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "comput3_agent.api.main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
        log_level="info",
    )
