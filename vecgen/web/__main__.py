#!/usr/bin/env python3

"""
Pattern generator web server

This script starts the HTTP service.
"""

import logging
import os

from vecgen.config.settings import Settings
from vecgen.web import create_app

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the web server"""
    settings = Settings.load(os.getenv("VECGEN_CONFIG"))
    Settings.setup_logging(settings["log_level"])

    app = create_app(settings)

    # Get port from environment or use default
    port = int(os.environ.get("WEB_PORT", settings["web_port"]))

    logger.info(f"Starting HTTP web server on port {port}...")
    app.run(host="0.0.0.0", port=port, debug=False, use_reloader=False)


if __name__ == "__main__":
    main()
