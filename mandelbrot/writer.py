"""PNG output for packed pixel buffers."""

from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np
import PIL.Image

_MODES = {1: "L", 3: "RGB", 4: "RGBA"}


class EncodeError(Exception):
    """Raised when a pixel buffer could not be written as an image file."""


def write_png(
    path: Union[str, Path],
    width: int,
    height: int,
    channels: int,
    buffer,
    row_stride: int,
) -> Path:
    """Encode ``buffer`` losslessly as a PNG at ``path``, overwriting any existing file."""

    output_path = Path(path)
    mode = _MODES.get(channels)
    if mode is None:
        raise EncodeError(f"Unsupported channel count {channels}.")
    if row_stride < width * channels:
        raise EncodeError(f"Row stride {row_stride} is smaller than {width} pixels of {channels} channels.")

    if isinstance(buffer, (bytes, bytearray, memoryview)):
        data = bytes(buffer)
    else:
        data = np.ascontiguousarray(buffer, dtype=np.uint8).tobytes()
    if len(data) != height * row_stride:
        raise EncodeError(f"Buffer holds {len(data)} bytes, expected {height * row_stride}.")

    try:
        image = PIL.Image.frombuffer(mode, (width, height), data, "raw", mode, row_stride, 1)
        image.save(str(output_path), format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Could not write {output_path}: {exc}") from exc
    return output_path
