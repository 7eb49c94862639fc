"""Color mapping from escape-time counts to RGB."""

from __future__ import annotations

import numpy as np

INSIDE_COLOR = (0, 0, 0)


def _check(max_iterations: int) -> None:
    if max_iterations <= 0:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}.")


def _clamp(value: float) -> int:
    return max(0, min(int(value), 255))


def color_of(iterations: int, max_iterations: int) -> tuple[int, int, int]:
    """Map an iteration count to an ``(r, g, b)`` triple.

    Points that reached ``max_iterations`` are colored black. Channels are
    truncated toward zero before being clamped to ``[0, 255]``.
    """

    _check(max_iterations)
    if iterations == max_iterations:
        return INSIDE_COLOR

    t = iterations / max_iterations
    u = 1 - t
    r = 9 * u * t * t * t * 255 * 1.5
    g = 15 * u * u * t * t * 255 * 1.5
    b = 8.5 * u * u * u * t * 255 * 1.5
    return _clamp(r), _clamp(g), _clamp(b)


def colorize(iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    """Vectorized ``color_of`` over an iteration field, returning ``uint8`` RGB."""

    _check(max_iterations)
    counts = np.asarray(iterations)
    t = counts.astype(np.float64) / np.float64(max_iterations)
    u = 1 - t

    r = 9 * u * t * t * t * 255 * 1.5
    g = 15 * u * u * t * t * 255 * 1.5
    b = 8.5 * u * u * u * t * 255 * 1.5
    rgb = np.stack((r, g, b), axis=-1)
    rgb = np.clip(np.trunc(rgb), 0, 255).astype(np.uint8)

    inside = counts == max_iterations
    rgb[inside] = INSIDE_COLOR
    return rgb
