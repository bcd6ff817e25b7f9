"""Command line interface for path orthogonalization.

Usage: pathortho [options] [aN] [cF] "<data>"
Example: pathortho -a 2 -c 10 "6218 8805, 6295 8675, 6501 8798, 6425 8927, 6218 8805"

data - source path, format: x y (, x y)*
output - result path in the same format, or an error text starting with "ERROR:" on stderr

Exit status: 0 on success, 1 if the path cannot be orthogonalized. Missing data or
invalid options print the usage and exit with status 2 like any argparse program;
calling without arguments is a usage error, not a silent no-op.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

from pathortho.common import MAX_ACCURACY
from pathortho.errors import OrthogonalizeError, PathFormatError
from pathortho.orthogonalizer import OrthoSettings, PathOrthogonalizer
from pathortho.page import OrthoSvgPage
from pathortho.path_text import PathTextFormatter, PathTextParser

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathortho",
        description="Orthogonalize a closed path (polygon) with optional collapse of short edges.",
        epilog='Use "--" before data starting with a negative number.',
    )
    parser.add_argument(
        "params",
        nargs="*",
        help="Short parameters: aN - accuracy N (0..20), cF - collapse length F (>= 0).",
    )
    parser.add_argument("data", help='Source path, e.g. "0 0, 10 0, 10 10, 0 10, 0 0".')
    parser.add_argument(
        "-a", "--accuracy", type=int, default=None, help=f"Decimals of the output (0..{MAX_ACCURACY}, default 0)."
    )
    parser.add_argument(
        "-c",
        "--collapse",
        type=float,
        default=None,
        help="Minimal edge length of the result, shorter edges are collapsed (default 0 = off).",
    )
    parser.add_argument(
        "--max-iterations",
        type=_positive_int,
        default=None,
        help="Upper bound for collapse passes (default: number of source edges).",
    )
    parser.add_argument("--svg", type=str, default=None, help="Write a preview to this SVG (or .svgz) file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug information to stderr.")
    return parser


def resolve_parameters(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> Tuple[int, float]:
    """Merge short parameters with options and clamp them. Options win over short parameters."""
    accuracy = 0
    collapse_length = 0.0
    for param in args.params:
        try:
            if param.startswith("a"):
                accuracy = int(param[1:])
            elif param.startswith("c"):
                collapse_length = float(param[1:])
            else:
                logger.debug("Ignoring unknown parameter '%s'", param)
        except ValueError:
            parser.error(f"invalid parameter '{param}'")

    if args.accuracy is not None:
        accuracy = args.accuracy
    if args.collapse is not None:
        collapse_length = args.collapse

    accuracy = PathTextFormatter.clamp_accuracy(accuracy)
    if not collapse_length > 0:
        collapse_length = 0.0
    return accuracy, collapse_length


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    accuracy, collapse_length = resolve_parameters(parser, args)
    settings = OrthoSettings(collapse_length=collapse_length, max_iterations=args.max_iterations)
    logger.debug("Settings: %s, accuracy %d", settings.to_dict(), accuracy)

    try:
        source = PathTextParser.parse(args.data)
        result = PathOrthogonalizer(settings).run(source)
    except (PathFormatError, OrthogonalizeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    text = PathTextFormatter.format(result.path, accuracy)
    if text:
        print(text)

    if args.svg:
        svg_page = OrthoSvgPage.from_paths(source, [result.path])
        svg_page.save_as(args.svg, include_debug_layer=True, pretty=True, compressed=args.svg.endswith(".svgz"))
        logger.debug("Preview written to %s", args.svg)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
