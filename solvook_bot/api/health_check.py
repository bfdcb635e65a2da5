"""
Health Check API Module

This module provides a simple health check endpoint to verify that the bot
service is running and connected to Slack.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel

from solvook_bot import __version__
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)

# Create router
router = APIRouter(tags=["health"])


# Models
class HealthResponse(BaseModel):
    """Response model for health check endpoint."""
    status: str
    version: str
    uptime: float
    components: Dict[str, Dict[str, Any]]


# Global variables
start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint to verify the service is running correctly.

    Returns:
        JSON response with health status information
    """
    # Calculate uptime
    uptime = time.time() - start_time

    adapter = getattr(request.app.state, "adapter", None)
    runner = getattr(request.app.state, "runner", None)
    connected = adapter is not None and await adapter.is_connected()

    components = {
        "slack": {
            "status": "healthy" if connected else "unavailable",
            "bot_user_id": adapter.bot_user_id if adapter is not None else None,
        },
        "tasks": {
            "status": "healthy",
            "pending": runner.pending if runner is not None else 0,
            "failures": runner.failures if runner is not None else 0,
        },
    }

    # Log health check request
    logger.debug(f"Health check requested from {request.client.host if request.client else 'unknown'}")

    return {
        "status": "healthy" if connected else "degraded",
        "version": __version__,
        "uptime": uptime,
        "components": components,
    }


@router.get("/ping")
async def ping() -> Dict[str, str]:
    """
    Simple ping endpoint for basic connectivity checks.

    Returns:
        JSON response with pong message
    """
    return {"ping": "pong"}
