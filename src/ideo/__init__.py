"""ideo package entrypoint.

main() parses command-line options using ideo.options, calls the Ideogram
API via ideo.client and writes the returned images via ideo.output. Only
written file paths reach stdout.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Sequence

from . import config, diagnostics
from ._version import __version__
from .client import IdeogramClient
from .errors import IdeoError, ProtocolError, UsageError
from .options import format_usage, parse_args
from .output import write_all
from .request import build_body, build_payload


def run(argv: Sequence[str]) -> int:
    """Run one invocation and return the process exit code."""

    parsed = parse_args(argv)
    request = parsed.request

    config.load_env_file()
    client_config = config.load_config()

    body = build_body(request)
    if parsed.verbose:
        diagnostics.emit_request_info(client_config.api_url, build_payload(request))

    noun = "image" if request.num_images == 1 else "images"
    diagnostics.status(f"Generating {request.num_images} {noun}...")
    start_time = time.perf_counter()

    with IdeogramClient(client_config) as client:
        results = client.generate(request, body)
        diagnostics.emit_elapsed(time.perf_counter() - start_time)
        report = write_all(
            client.fetch_images(results), parsed.output, request.num_images
        )

    if report.failures:
        diagnostics.error(
            f"{len(report.failures)} of {request.num_images} {noun} failed, "
            f"{len(report.written)} written"
        )
    return report.exit_code


def main() -> None:
    """CLI entrypoint: parse argv, run inference, and persist image files."""

    try:
        exit_code = run(sys.argv[1:])
    except UsageError as exc:
        print(format_usage(), end="", file=sys.stderr)
        diagnostics.error(str(exc))
        raise SystemExit(exc.exit_code) from exc
    except ProtocolError as exc:
        diagnostics.error(str(exc))
        if exc.raw:
            diagnostics.status(f"response body:\n{exc.raw}")
        raise SystemExit(exc.exit_code) from exc
    except IdeoError as exc:
        diagnostics.error(str(exc))
        raise SystemExit(exc.exit_code) from exc
    except KeyboardInterrupt as exc:
        diagnostics.error("interrupted")
        raise SystemExit(130) from exc

    raise SystemExit(exit_code)


__all__ = ["__version__", "main", "run"]
