"""
Command-line interface for qrgrid.

Encodes one text argument and writes the symbol as SVG, an SVG data URL,
PNG or terminal text, to a file or to standard output.

Functions
---------
build_arg_parser
    Argument parser for the ``qrgrid`` command.
render
    Encode and render parsed arguments to bytes.
main
    Console-script entry point.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from . import config
from .encoder import QROptions, encode
from .errors import QRGridError
from .render import QRImage, RenderOptions, to_data_url, to_svg, to_text

logger = logging.getLogger("qrgrid")

FORMATS = ("svg", "data-url", "png", "txt")


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the parser for the ``qrgrid`` command."""
    parser = argparse.ArgumentParser(prog="qrgrid", description="Encode text as a QR code")
    parser.add_argument("text", help="Payload to encode")
    parser.add_argument(
        "-l", "--level", default=config.DEFAULT_ERROR_CORRECTION,
        choices=["L", "M", "Q", "H"], type=str.upper, help="Error-correction level",
    )
    parser.add_argument(
        "--profile", default=config.DEFAULT_PROFILE, choices=["compat", "standard"],
        help="Symbol layout; 'standard' produces scannable ISO symbols",
    )
    parser.add_argument(
        "--lossy", action="store_true",
        help="Clamp or truncate oversize and non-Latin payloads instead of failing (compat only)",
    )
    parser.add_argument(
        "--mask", type=int, default=config.DEFAULT_MASK_PATTERN,
        help="Mask pattern 0-7 (standard only)",
    )
    parser.add_argument("-f", "--format", choices=FORMATS, default="svg")
    parser.add_argument("-o", "--output", default=None, help="Output file; omit for stdout")
    parser.add_argument("--margin", type=int, default=config.DEFAULT_MARGIN, help="Quiet zone in modules")
    parser.add_argument("--scale", type=int, default=config.DEFAULT_SCALE, help="Pixels per module")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log encoding decisions")
    return parser


def render(args: argparse.Namespace) -> bytes:
    """
    Encode `args.text` and render it in the requested format.

    Returns
    -------
    bytes
        File contents; text formats are UTF-8 with a trailing newline
        (SVG has none).

    Raises
    ------
    QRGridError
        If the text cannot be encoded with the requested options.
    """
    options = QROptions(
        error_correction=args.level,
        profile=args.profile,
        lossy=args.lossy,
        mask_pattern=args.mask,
    )
    qr = encode(args.text, options)
    logger.info("encoded %d characters as version %d (%dx%d)", len(args.text), qr.version, qr.size, qr.size)

    if args.format == "png":
        image = QRImage(qr, RenderOptions(margin=args.margin, scale=args.scale))
        return image.to_png_bytes()
    if args.format == "txt":
        return (to_text(qr, margin=args.margin) + "\n").encode("utf-8")
    if args.format == "data-url":
        return (to_data_url(qr, margin=args.margin, scale=args.scale) + "\n").encode("ascii")
    return to_svg(qr, margin=args.margin, scale=args.scale).encode("utf-8")


def main(argv: List[str] | None = None) -> int:
    """
    Run the command.

    Parameters
    ----------
    argv : list of str, optional
        Arguments without the program name. The default is
        ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit status: 0 on success, 2 if the text cannot be encoded.
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(levelname)s: %(message)s",
    )

    try:
        payload = render(args)
    except QRGridError as exc:
        print(f"qrgrid: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        parser.error(str(exc))

    if args.output:
        Path(args.output).write_bytes(payload)
        logger.info("wrote %s", args.output)
    else:
        sys.stdout.buffer.write(payload)
        sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
