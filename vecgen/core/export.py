import json
import logging
import os
from typing import Any, Dict

from vecgen.core.svg_writer import to_svg

logger = logging.getLogger(__name__)


def build_metadata(result) -> Dict[str, Any]:
    """Companion record for an exported drawing"""
    options = result.options
    vector = options.captured_vector
    return {
        "timestamp": result.timestamp.isoformat(),
        "generation_count": result.generation_count,
        "options_used": options.to_dict(),
        "math_properties": result.summary(),
        "palette": list(result.palette),
        "captured_coordinates": {
            "x": options.captured_x,
            "y": options.captured_y,
            "vector": {"x": vector[0], "y": vector[1]} if vector else None,
        },
    }


def _ensure_parent(path: str):
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)


def export_svg(result, path: str) -> str:
    """Write the SVG document and return the path"""
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(to_svg(result))
    logger.info(f"Wrote SVG to {path}")
    return path


def export_metadata(result, path: str) -> str:
    """Write the metadata JSON document and return the path"""
    _ensure_parent(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_metadata(result), f, indent=2)
    logger.info(f"Wrote metadata to {path}")
    return path
