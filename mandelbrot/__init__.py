"""Public API for Mandelbrot fractal pattern rendering."""

from .palette import color_of, colorize
from .renderer import (
    DEFAULT_PARAMETERS,
    RenderParameters,
    RenderResult,
    compute_iterations,
    escape_time,
    pixel_to_complex,
    render_frame,
    render_reference,
)
from .writer import EncodeError, write_png

OUTPUT_FILENAME = "mandelbrot_fractal_pattern.png"

__all__ = [
    "DEFAULT_PARAMETERS",
    "EncodeError",
    "OUTPUT_FILENAME",
    "RenderParameters",
    "RenderResult",
    "color_of",
    "colorize",
    "compute_iterations",
    "escape_time",
    "pixel_to_complex",
    "render_frame",
    "render_reference",
    "write_png",
]
