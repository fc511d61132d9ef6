"""Command-line options parser for ideo.

Usage:
- build_parser() -> argparse.ArgumentParser
- parse_args(argv, parser=None, now=None) -> ParsedOptions

The parse result includes:
- request: the immutable GenerationRequest sent upstream
- output: the OutputSpec used to name written files
- verbose: whether to dump the outgoing request on stderr

Rules enforced:
- The prompt is positional; multiple words are joined with spaces and the
  result must not be blank.
- -a/--aspect, -s/--speed, --style and --magic-prompt only accept their
  enumerated values (case-insensitive; aspect ratios also accept W:H).
- -n/--num must be a positive integer, --seed any integer.
- --character-ref must name a JPEG, PNG or WebP file.
- Every parse failure raises UsageError instead of exiting.
"""

from __future__ import annotations

import argparse
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar

from ._version import __version__
from .errors import UsageError
from .models import (
    AspectRatio,
    GenerationRequest,
    MagicPrompt,
    RenderingSpeed,
    StyleType,
)
from .output import OutputSpec
from .registry import CHARACTER_REFERENCE_MIME_TYPES

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class ParsedOptions:
    """Structured result of parsing the command line.

    Attributes:
        request: Validated generation parameters.
        output: Output naming for this invocation.
        verbose: Whether the CLI requested the request dump on stderr.
    """

    request: GenerationRequest
    output: OutputSpec
    verbose: bool = False


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def _choices(enum_cls: type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


def _enum_type(
    enum_cls: type[E], label: str, *, normalize: Callable[[str], str] = str.upper
) -> Callable[[str], E]:
    def _parse(value: str) -> E:
        candidate = normalize(value.strip())
        for member in enum_cls:
            if member.value == candidate:
                return member
        raise argparse.ArgumentTypeError(
            f"invalid {label} '{value}' (choose from {_choices(enum_cls)})"
        )

    return _parse


def _normalize_aspect(value: str) -> str:
    return value.lower().replace(":", "x")


def _positive_int(value: str) -> int:
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"number of images must be a positive integer, got '{value}'"
        ) from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(
            f"number of images must be a positive integer, got '{value}'"
        )
    return parsed


def _integer(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"seed must be an integer, got '{value}'"
        ) from exc


def _output_path(value: str) -> Path:
    path = Path(value)
    if not value.strip() or not path.name or value.endswith(("/", "\\")):
        raise argparse.ArgumentTypeError(f"output must name a file, got '{value}'")
    return path


def _character_ref(value: str) -> Path:
    path = Path(value)
    if path.suffix.lower() not in CHARACTER_REFERENCE_MIME_TYPES:
        raise argparse.ArgumentTypeError(
            "character reference image must be JPEG, PNG, or WebP"
        )
    return path


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""

    parser = _Parser(
        prog="ideo",
        description=(
            "Generate images with the Ideogram v3 API. File paths are printed "
            "to stdout (one per line); status messages go to stderr."
        ),
    )
    parser.add_argument("prompt", nargs="+", help="the prompt to generate images from")
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        type=_output_path,
        metavar="FILE",
        help="output path or template (default: ideo_<timestamp>.png)",
    )
    parser.add_argument(
        "-a",
        "--aspect",
        dest="aspect_ratio",
        type=_enum_type(AspectRatio, "aspect ratio", normalize=_normalize_aspect),
        default=AspectRatio.R1X1,
        metavar="RATIO",
        help=f"one of: {_choices(AspectRatio)} (default 1x1)",
    )
    parser.add_argument(
        "-s",
        "--speed",
        dest="rendering_speed",
        type=_enum_type(RenderingSpeed, "rendering speed"),
        default=RenderingSpeed.TURBO,
        metavar="SPEED",
        help=f"{'|'.join(m.value for m in RenderingSpeed)} (default TURBO)",
    )
    parser.add_argument(
        "-n",
        "--num",
        dest="num_images",
        type=_positive_int,
        default=1,
        metavar="NUM",
        help="number of images to generate (default 1)",
    )
    parser.add_argument(
        "--style",
        dest="style_type",
        type=_enum_type(StyleType, "style type"),
        metavar="TYPE",
        help="|".join(m.value for m in StyleType),
    )
    parser.add_argument(
        "--negative",
        dest="negative_prompt",
        metavar="TEXT",
        help="negative prompt: what to exclude from the image",
    )
    parser.add_argument(
        "--seed",
        dest="seed",
        type=_integer,
        metavar="NUM",
        help="random seed for reproducible generation",
    )
    parser.add_argument(
        "--magic-prompt",
        dest="magic_prompt",
        type=_enum_type(MagicPrompt, "magic prompt mode"),
        metavar="MODE",
        help="|".join(m.value for m in MagicPrompt),
    )
    parser.add_argument(
        "--character-ref",
        dest="character_reference",
        type=_character_ref,
        metavar="FILE",
        help="character reference image (JPEG, PNG, or WebP; max 10MB)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="print the outgoing request on stderr",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def parse_args(
    argv: Sequence[str],
    *,
    parser: argparse.ArgumentParser | None = None,
    now: float | None = None,
) -> ParsedOptions:
    """Parse argv into a ParsedOptions object.

    ``now`` pins the timestamp used for default output names; it defaults to
    the current time.
    """

    if parser is None:
        parser = build_parser()

    ns = parser.parse_args(list(argv))

    prompt = " ".join(ns.prompt).strip()
    if not prompt:
        raise UsageError("prompt must not be empty")

    negative = ns.negative_prompt
    if negative is not None and not negative.strip():
        negative = None

    request = GenerationRequest(
        prompt=prompt,
        aspect_ratio=ns.aspect_ratio,
        rendering_speed=ns.rendering_speed,
        num_images=ns.num_images,
        style_type=ns.style_type,
        negative_prompt=negative,
        seed=ns.seed,
        magic_prompt=ns.magic_prompt,
        character_reference=ns.character_reference,
    )
    timestamp = int(time.time() if now is None else now)
    return ParsedOptions(
        request=request,
        output=OutputSpec(template=ns.output, timestamp=timestamp),
        verbose=bool(ns.verbose),
    )


def format_usage() -> str:
    return build_parser().format_usage()
