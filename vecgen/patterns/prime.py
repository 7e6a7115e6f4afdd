import logging
import math
from typing import Any, Dict, List, Sequence

from vecgen.config.options import GenerationOptions
from vecgen.core.primitives import Circle, Group, Polygon, Rect, Style
from vecgen.patterns.base import (
    COMMON_PARAMETERS,
    Pattern,
    PatternDefinition,
    PatternRegistry,
)

logger = logging.getLogger(__name__)


def is_prime(n: int) -> bool:
    """Trial division over 6k +/- 1 candidates"""
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


def first_primes(count: int, search_limit: int = 100000) -> List[int]:
    """Collect up to ``count`` primes, giving up past ``search_limit`` if fewer
    than half were found"""
    primes: List[int] = []
    num = 2
    while len(primes) < count:
        if is_prime(num):
            primes.append(num)
        num += 1
        if num > search_limit and len(primes) < count / 2:
            logger.warning(f"Prime search passed {search_limit}, stopping early")
            break
    return primes


@PatternRegistry.register
class Prime(Pattern):
    @classmethod
    def definition(cls) -> PatternDefinition:
        return PatternDefinition(
            name="prime",
            description="Prime numbers laid out on a grid or a square spiral",
            parameters=COMMON_PARAMETERS,
            category="mathematical",
            tags=["primes", "ulam", "number theory"],
        )

    def generate(
        self, parent: Group, options: GenerationOptions, palette: Sequence[str]
    ) -> Dict[str, Any]:
        params = self.validate_params(options)
        scale = params["scale"]

        num_elements = max(
            10,
            math.floor(
                100 * params["complexity"] * (params["density"] / 100) * params["repetition"]
            ),
        )
        primes = first_primes(num_elements, self.limit("prime_search_limit"))
        if not primes:
            logger.warning("No primes generated")
            return {"element_count": 0, "prime_count": 0}

        largest = primes[-1]
        log_largest = math.log(largest + 1)
        element_count = 0

        layout = self.randint(0, 1)
        if layout == 0:
            grid_size = math.ceil(math.sqrt(len(primes)))
            cell_w = self.width / grid_size
            cell_h = self.height / grid_size
            for i, prime in enumerate(primes):
                x = (i % grid_size) * cell_w + cell_w / 2
                y = (i // grid_size) * cell_h + cell_h / 2
                size = max(2, min(cell_w, cell_h) * 0.8 * (math.log(prime + 1) / log_largest) * scale)
                self._draw_prime(parent, x, y, size, prime, params, palette)
                element_count += 1
        else:
            x, y = self.width / 2, self.height / 2
            step = min(self.width, self.height) / math.sqrt(len(primes)) * 0.5 * scale
            dx, dy = step, 0.0
            steps_taken, steps_limit, turns = 0, 1, 0

            for prime in primes:
                size = max(1, step * 0.8 * (math.log(prime + 1) / log_largest) * scale)
                self._draw_prime(parent, x, y, size, prime, params, palette)
                element_count += 1

                x += dx
                y += dy
                steps_taken += 1
                if steps_taken >= steps_limit:
                    steps_taken = 0
                    dx, dy = -dy, dx
                    turns += 1
                    if turns >= 2:
                        turns = 0
                        steps_limit += 1

        return {
            "element_count": element_count,
            "prime_count": len(primes),
            "largest_prime": largest,
            "layout": "Grid" if layout == 0 else "Spiral",
        }

    def _draw_prime(self, parent, x, y, size, prime, params, palette):
        fill = self.fill(palette, params["fill_type"])
        sw = params["stroke_weight"]
        style = Style(
            fill=fill, stroke=params["stroke_color"], stroke_width=sw, opacity=params["opacity"]
        )
        half = size / 2

        shape_type = prime % 5
        if shape_type == 0:
            parent.add(Circle(x, y, max(1, half), style))
        elif shape_type == 1:
            parent.add(Rect(x - half, y - half, max(1, size), max(1, size), style))
        elif shape_type == 2:
            y_off = (math.sqrt(3) / 2) * size / 3
            parent.add(
                Polygon([(x, y - 2 * y_off), (x + half, y + y_off), (x - half, y + y_off)], style)
            )
        elif shape_type == 3:
            parent.add(Polygon([(x, y - half), (x + half, y), (x, y + half), (x - half, y)], style))
        else:
            # Ring outlined in the fill color
            parent.add(
                Circle(
                    x,
                    y,
                    max(1, half),
                    Style(
                        fill="none",
                        stroke=fill,
                        stroke_width=max(0.5, sw * 1.5),
                        opacity=params["opacity"],
                    ),
                )
            )
