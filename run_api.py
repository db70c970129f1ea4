#!/usr/bin/env python3
"""
Launcher script for the Sheet Order Tracker API
Handles path setup, validates configuration and starts uvicorn
"""
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import uvicorn

import config
from api.main import create_app
from utils.logger import get_logger


def main():
    logger = get_logger()
    try:
        config.validate_config()
    except ValueError as e:
        logger.critical(str(e), component="Main")
        sys.exit(1)

    logger.info(
        f"REST API running on http://{config.API_HOST}:{config.API_PORT} (Swagger: /docs)",
        component="API",
    )
    uvicorn.run(create_app(), host=config.API_HOST, port=config.API_PORT, log_level="info")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
