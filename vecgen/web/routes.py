"""
Routes for the pattern generator web service.
"""

import logging

from flask import current_app, jsonify, request

from vecgen.config.options import GenerationOptions
from vecgen.core.export import build_metadata
from vecgen.core.svg_writer import to_svg
from vecgen.patterns import PatternRegistry
from vecgen.web import app

logger = logging.getLogger(__name__)


def _type_name(param_type) -> str:
    return getattr(param_type, "__name__", str(param_type))


@app.route("/health")
def health_check():
    """Health check endpoint for the web service"""
    return jsonify({"status": "ok", "service": "vecgen_web", "version": "1.0.0"})


@app.route("/api/colors", methods=["GET"])
def get_colors():
    """All palette categories with their named colors"""
    return jsonify(current_app.config["VECGEN_PALETTES"])


@app.route("/api/patterns", methods=["GET"])
def get_patterns():
    """Get list of available patterns"""
    pattern_data = []
    for definition in PatternRegistry.list_patterns():
        pattern_data.append(
            {
                "name": definition.name,
                "description": definition.description,
                "category": definition.category,
                "tags": definition.tags,
                "parameters": [
                    {
                        "name": param.name,
                        "type": _type_name(param.type),
                        "default": param.default,
                        "min_value": param.min_value,
                        "max_value": param.max_value,
                        "description": param.description,
                    }
                    for param in definition.parameters
                ],
            }
        )

    logger.debug(f"Returning {len(pattern_data)} patterns")
    return jsonify({"patterns": pattern_data})


@app.route("/api/generate", methods=["POST"])
def generate():
    """Run one generation pass with the posted options"""
    data = request.get_json(silent=True)
    if data is None and request.get_data():
        return jsonify({"success": False, "error": "Request body is not valid JSON"}), 400
    if data is not None and not isinstance(data, dict):
        return jsonify({"success": False, "error": "Options must be a JSON object"}), 400

    options = GenerationOptions.from_dict(data or {})
    compositor = current_app.config["VECGEN_COMPOSITOR"]
    result = compositor.generate(options)

    return jsonify(
        {
            "success": result.ok,
            "svg": to_svg(result),
            "metadata": build_metadata(result),
        }
    )
