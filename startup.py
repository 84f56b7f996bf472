#!/usr/bin/env python3
"""
PrepWise FastAPI Startup Script
Main entry point for the PrepWise API application
"""
import uvicorn
from loguru import logger

from prepwise.core.config import get_settings
from prepwise.core.firebase import initialize_firebase
from prepwise.core.logging import setup_logging

def start_server():
    """Start the FastAPI server with Firebase initialization"""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    try:
        initialize_firebase()

        logger.info("Starting PrepWise API server...")
        logger.info("API Documentation: http://localhost:8000/docs")
        logger.info("Health Check: http://localhost:8000/health")

        uvicorn.run(
            "prepwise.main:app",
            host="0.0.0.0",
            port=8000,
            reload=settings.DEBUG,
            log_level=settings.LOG_LEVEL.lower()
        )
    except Exception:
        logger.exception("Failed to start server")
        raise

if __name__ == "__main__":
    start_server()
