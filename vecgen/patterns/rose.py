import logging
import math
from typing import Any, Dict, Sequence

import numpy as np

from vecgen.config.options import FillType, GenerationOptions
from vecgen.core.path_serializer import points_to_path_string
from vecgen.core.primitives import Group, Path, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
    option_parameters,
)

logger = logging.getLogger(__name__)


@PatternRegistry.register
class Rose(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="rose",
            description="Rose curve r = a*cos(n*theta), closed and filled",
            parameters=COMMON_PARAMETERS
            + option_parameters("rose_n", "curve_steps", "curve_smoothing", "spline_tension"),
            category="curves",
            tags=["rose", "polar"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        a = min(self.width, self.height) * 0.4 * params["scale"]
        n = max(0.1, params["rose_n"])
        steps = max(50, math.floor(params["density"] * 3) + 50)
        if params["curve_steps"] > 0:
            steps = params["curve_steps"]

        theta = np.arange(steps + 1) / steps * math.pi * 2
        r = a * np.cos(n * theta)
        xs = self.width / 2 + r * np.cos(theta)
        ys = self.height / 2 + r * np.sin(theta)
        points = list(zip(xs.tolist(), ys.tolist()))

        d = points_to_path_string(
            points, params["curve_smoothing"], params["spline_tension"], close_path=True
        )
        if not d:
            logger.warning("Not enough points for the rose curve")
            return {"element_count": 0, "n_param": n}

        if params["fill_type"] == FillType.NONE.value:
            fill = "none"
        else:
            fill = self.fill(palette, params["fill_type"])

        parent.add(
            Path(
                d,
                Style(
                    fill=fill,
                    stroke=self.choice(palette, params["stroke_color"]),
                    stroke_width=params["stroke_weight"],
                    opacity=params["opacity"],
                ),
            )
        )

        return {"element_count": 1, "n_param": n, "amplitude": f"{a:.2f}", "steps": steps}
