"""stderr status reporting; stdout is reserved for written file paths."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from pathlib import Path
from pprint import pformat
from typing import Any


def status(message: str) -> None:
    print(message, file=sys.stderr, flush=True)


def warning(message: str) -> None:
    print(f"warning: {message}", file=sys.stderr, flush=True)


def error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr, flush=True)


def emit_path(path: Path) -> None:
    """Print one written file path to stdout."""

    print(str(path), flush=True)


def emit_request_info(url: str, payload: Mapping[str, Any]) -> None:
    status("Request:")
    status(pformat({"url": url, "payload": dict(payload)}))


def emit_elapsed(elapsed_seconds: float) -> None:
    status(f"Done in {format_elapsed(elapsed_seconds)}")


def format_elapsed(elapsed_seconds: float) -> str:
    hours, remainder = divmod(elapsed_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{int(hours)}:{int(minutes):02d}:{seconds:06.3f}"
