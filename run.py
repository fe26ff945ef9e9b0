#!/usr/bin/env python3
"""
Run the Intake Tier Router web server.
"""

import logging

import uvicorn

from utils.config import Config


def main():
    """Start the web server."""
    config = Config.load()
    logging.basicConfig(level=logging.DEBUG if config.debug else logging.INFO)

    print(f"Starting Intake Tier Router on http://{config.host}:{config.port}")
    if config.tier_config_path:
        print(f"Tier rules: {config.tier_config_path}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
