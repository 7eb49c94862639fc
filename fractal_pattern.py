import os
import sys
import warnings
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from argparse import ArgumentParser

from mandelbrot import (
    DEFAULT_PARAMETERS,
    OUTPUT_FILENAME,
    EncodeError,
    RenderParameters,
    render_frame,
    write_png,
)


def select_device():
    """Use the first visible GPU when one is present, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(
        description='Render the Mandelbrot set over [-2, 1] x [-1.5, 1.5] to %s.' % OUTPUT_FILENAME)
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')
    return parser


def generate(params: RenderParameters = DEFAULT_PARAMETERS, output_path=OUTPUT_FILENAME, device=None) -> int:
    """Render ``params``, write the PNG and return the process exit status."""

    print("Generating Mandelbrot...")
    result = render_frame(params, device=device)
    print("Mandelbrot generation complete.")
    print("Image buffer size: {0}".format(result.buffer.size))

    try:
        written = write_png(
            output_path,
            params.width,
            params.height,
            params.channels,
            result.buffer,
            result.row_stride,
        )
    except EncodeError as e:
        print("Failed to save the image!", file=sys.stderr)
        log(e)
        return 1

    log("Wrote %s" % Path(written).resolve())
    print("Image saved successfully!")
    return 0


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    log("TensorFlow version: %s" % tf.__version__)
    device = select_device()
    return generate(DEFAULT_PARAMETERS, OUTPUT_FILENAME, device=device)


if __name__ == '__main__':
    sys.exit(main())
