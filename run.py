#!/usr/bin/env python3
"""
Run the Spatial Asset Register API server.
"""

import logging

import uvicorn

from utils.config import Config


def main():
    """Start the web server."""
    config = Config.load()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("run")

    logger.info("Starting Spatial Asset Register on http://%s:%d", config.host, config.port)
    if config.debug:
        logger.warning("Debug mode enabled - do not use in production")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
