"""
HTTP service for the pattern generator.

Serves the palette library, the pattern catalogue and a stateless
generate endpoint returning SVG text plus metadata.
"""

import logging
import os

from flask import Flask
from flask_cors import CORS

from vecgen.config.settings import Settings
from vecgen.core.compositor import LayerCompositor
from vecgen.core.palettes import load_palettes

logger = logging.getLogger(__name__)

# Create Flask app
app = Flask(__name__)

# Enable CORS for all routes
CORS(app)


def create_app(settings=None, palettes=None):
    """
    Create and configure the Flask application.

    Args:
        settings: Config dict as returned by Settings.load (defaults if None)
        palettes: Category -> colors map (bundled palettes if None)

    Returns:
        The configured Flask app
    """
    settings = settings or Settings.load(os.getenv("VECGEN_CONFIG"))
    if palettes is None:
        palettes = load_palettes(settings.get("palette_file") or None)

    app.config["VECGEN_SETTINGS"] = settings
    app.config["VECGEN_PALETTES"] = palettes
    app.config["VECGEN_COMPOSITOR"] = LayerCompositor(settings=settings, palettes=palettes)

    # Import routes after app is created to avoid circular imports
    import vecgen.web.routes  # noqa: F401

    logger.info("Pattern generator web service initialized")
    return app
