"""Rendering primitives for the Mandelbrot fractal pattern."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .palette import colorize, color_of

HORIZON = 2.0
HORIZON_SQUARED = HORIZON * HORIZON


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe the render of the Mandelbrot region."""

    width: int = 800
    height: int = 800
    max_iterations: int = 1000
    min_real: float = -2.0
    max_real: float = 1.0
    min_imag: float = -1.5
    max_imag: float = 1.5

    @property
    def channels(self) -> int:
        return 3

    @property
    def row_stride(self) -> int:
        return self.width * self.channels

    @property
    def buffer_size(self) -> int:
        return self.height * self.row_stride


DEFAULT_PARAMETERS = RenderParameters()


@dataclass(frozen=True)
class RenderResult:
    """Container for the iteration field and packed pixels of a render."""

    iterations: np.ndarray
    pixels: np.ndarray
    params: RenderParameters

    @property
    def buffer(self) -> np.ndarray:
        """Flat, row-major RGB view of ``pixels``."""

        return self.pixels.reshape(-1)

    @property
    def row_stride(self) -> int:
        return self.params.row_stride


def _check_max_iterations(max_iterations: int) -> None:
    if max_iterations <= 0:
        raise ValueError(f"max_iterations must be positive, got {max_iterations}.")


def escape_time(real: float, imag: float, max_iterations: int) -> int:
    """Return the number of iterations of ``z = z*z + c`` before ``|z|`` reaches 2.

    ``max_iterations`` is returned for points that never escape.
    """

    _check_max_iterations(max_iterations)
    zr = 0.0
    zi = 0.0
    count = 0
    while zr * zr + zi * zi < HORIZON_SQUARED and count < max_iterations:
        zr, zi = zr * zr - zi * zi + real, 2.0 * zr * zi + imag
        count += 1
    return count


def pixel_to_complex(params: RenderParameters, x: int, y: int) -> tuple[float, float]:
    real = params.min_real + (x / params.width) * (params.max_real - params.min_real)
    imag = params.min_imag + (y / params.height) * (params.max_imag - params.min_imag)
    return real, imag


def _sample_axes(params: RenderParameters) -> tuple[np.ndarray, np.ndarray]:
    real_span = np.float64(params.max_real) - np.float64(params.min_real)
    imag_span = np.float64(params.max_imag) - np.float64(params.min_imag)
    cols = np.arange(params.width, dtype=np.float64)
    rows = np.arange(params.height, dtype=np.float64)
    real = np.float64(params.min_real) + (cols / np.float64(params.width)) * real_span
    imag = np.float64(params.min_imag) + (rows / np.float64(params.height)) * imag_span
    return real, imag


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    ns: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Perform a single Mandelbrot iteration for points that have not escaped."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = tf.constant(2.0, dtype=zr.dtype) * zr * zi + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    ns = ns + tf.cast(active, tf.int32)
    horizon = tf.constant(HORIZON_SQUARED, dtype=zr.dtype)
    new_active = tf.logical_and(active, zr * zr + zi * zi < horizon)
    return zr, zi, ns, new_active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor) -> tf.Tensor:
    """Iterate the Mandelbrot formula over a grid using a TensorFlow while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    ns = tf.zeros(tf.shape(cr), tf.int32)
    active = tf.ones(tf.shape(cr), tf.bool)

    def cond(i, zr, zi, ns, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, ns, active):
        zr, zi, ns, active = _escape_step(zr, zi, cr, ci, ns, active)
        return i + 1, zr, zi, ns, active

    _, _, _, ns, _ = tf.while_loop(cond, body, (i, zr, zi, ns, active))
    return ns


def compute_iterations(params: RenderParameters, *, device: Optional[str] = None) -> np.ndarray:
    """Escape-time counts for every pixel, shaped ``(height, width)``."""

    _check_max_iterations(params.max_iterations)
    real, imag = _sample_axes(params)

    with tf.device(device if device is not None else "/CPU:0"):
        real_tf = tf.convert_to_tensor(real, dtype=tf.float64)
        imag_tf = tf.convert_to_tensor(imag, dtype=tf.float64)
        cr, ci = tf.meshgrid(real_tf, imag_tf)
        ns = _escape_run(cr, ci, tf.constant(params.max_iterations, dtype=tf.int32))

    return ns.numpy()


def render_frame(params: RenderParameters = DEFAULT_PARAMETERS, *, device: Optional[str] = None) -> RenderResult:
    """Render the fractal pattern described by ``params``."""

    iterations = compute_iterations(params, device=device)
    pixels = np.ascontiguousarray(colorize(iterations, params.max_iterations))
    return RenderResult(iterations=iterations, pixels=pixels, params=params)


def render_reference(params: RenderParameters = DEFAULT_PARAMETERS) -> bytearray:
    """Pixel-by-pixel render, one ``escape_time`` call per pixel."""

    buffer = bytearray(params.buffer_size)
    for x in range(params.width):
        for y in range(params.height):
            real, imag = pixel_to_complex(params, x, y)
            iterations = escape_time(real, imag, params.max_iterations)
            index = (y * params.width + x) * params.channels
            buffer[index:index + 3] = bytes(color_of(iterations, params.max_iterations))
    return buffer
