"""glitchart command line — decode an image, run the pipeline, write a PNG.

    glitchart photo.jpg -o glitched.png --rgb-split 50 --bit-crush 80
    glitchart photo.jpg -o glitched.png --set colorShift=25 --seed 7
    glitchart --list
"""

import argparse
import logging
import os
import sys
from pathlib import Path

import sentry_sdk

from glitchart import __version__
from glitchart.diagnostics import init_diagnostics
from glitchart.effects import registry
from glitchart.engine.pipeline import DEFAULT_SEED, EffectError, apply
from glitchart.imageio import MAX_DIMENSION, load_image, save_image

logger = logging.getLogger(__name__)

CONSENT_PATH = "~/.glitchart/telemetry_consent"


def init_sentry():
    """Consent-gated Sentry init: no DSN unless the user opted in."""
    consent_path = os.path.expanduser(CONSENT_PATH)
    dsn = ""
    if os.path.exists(consent_path) and Path(consent_path).read_text().strip() == "yes":
        dsn = os.environ.get("SENTRY_DSN", "")

    sentry_sdk.init(
        dsn=dsn,
        release=f"glitchart@{__version__}",
        environment=os.environ.get("SENTRY_ENV", "development"),
        max_breadcrumbs=50,
    )


def _flag(effect_id: str) -> str:
    """rgbSplit -> --rgb-split"""
    out = "".join(f"-{c.lower()}" if c.isupper() else c for c in effect_id)
    return f"--{out}"


def _parse_assignment(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected id=value, got {text!r}")
    return key.strip(), value.strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glitchart",
        description="Turn a photo into glitch art with eight tunable effects.",
    )
    parser.add_argument("input", nargs="?", help="Source image (png, jpeg, webp, ...)")
    parser.add_argument("-o", "--output", help="Output image path (.png recommended)")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Noise seed")
    parser.add_argument(
        "--max-size",
        type=int,
        default=MAX_DIMENSION,
        help=f"Downscale so neither side exceeds this (default {MAX_DIMENSION})",
    )
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        type=_parse_assignment,
        default=[],
        metavar="ID=N",
        help="Set an intensity by effect id; may repeat",
    )
    parser.add_argument("--list", action="store_true", help="List effects and exit")
    parser.add_argument("--log-dir", help="Write JSON logs under ~/.glitchart")
    parser.add_argument("--version", action="version", version=__version__)

    group = parser.add_argument_group("effect intensities (0-100)")
    for info in registry.list_all():
        group.add_argument(
            _flag(info["id"]),
            dest=info["id"],
            type=int,
            default=None,
            metavar="N",
            help=info["params"]["intensity"]["description"],
        )
    return parser


def collect_intensities(args: argparse.Namespace) -> dict:
    """Merge --set assignments and per-effect flags; flags win."""
    intensities: dict = dict(args.assignments)
    for effect_id in registry.effect_ids():
        value = getattr(args, effect_id, None)
        if value is not None:
            intensities[effect_id] = value
    return intensities


def print_effects() -> None:
    print(f"{'#':<3} {'Id':<22} {'Name':<16} {'Category'}")
    print("-" * 56)
    for info in registry.list_all():
        print(f"{info['ordinal']:<3} {info['id']:<22} {info['name']:<16} {info['category']}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        print_effects()
        return 0
    if not args.input or not args.output:
        parser.error("input and --output are required")

    if args.log_dir:
        init_diagnostics(args.log_dir)
    init_sentry()

    intensities = collect_intensities(args)
    try:
        source = load_image(args.input, max_size=args.max_size)
        result = apply(source, intensities, seed=args.seed)
        save_image(result, args.output)
    except (ValueError, EffectError, OSError) as e:
        # ImageDecodeError, InvalidBuffer and unknown output extensions are ValueErrors
        logger.error("glitchart failed: %s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {result.width}x{result.height} image to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
