"""Output path computation and image persistence."""

from __future__ import annotations

import contextlib
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from . import diagnostics
from .errors import FetchError, IdeoError, WriteError

DEFAULT_PREFIX = "ideo"
DEFAULT_SUFFIX = ".png"
PARTIAL_SUFFIX = ".part"


@dataclass(frozen=True)
class OutputSpec:
    """Where images for one run are written.

    Naming rules, for ``total`` images and 1-based ``index``:
    - no template, one image: ``ideo_<timestamp>.png``
    - no template, several images: ``ideo_<timestamp>_<index>.png``
    - template, one image: the template verbatim
    - template, several images: ``<stem>_<index><suffix>`` next to the template
    """

    template: Path | None
    timestamp: int

    def path_for(self, index: int, total: int) -> Path:
        if total < 1 or not 1 <= index <= total:
            raise ValueError(f"index {index} out of range for {total} image(s)")
        if self.template is None:
            if total == 1:
                return Path(f"{DEFAULT_PREFIX}_{self.timestamp}{DEFAULT_SUFFIX}")
            return Path(f"{DEFAULT_PREFIX}_{self.timestamp}_{index}{DEFAULT_SUFFIX}")
        if total == 1:
            return self.template
        template = self.template
        return template.with_name(f"{template.stem}_{index}{template.suffix}")

    def paths(self, total: int) -> list[Path]:
        return [self.path_for(index, total) for index in range(1, total + 1)]


@dataclass(frozen=True)
class ImageOutcome:
    index: int
    path: Path | None = None
    error: IdeoError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunReport:
    """Per-index outcomes of a run, in index order."""

    outcomes: list[ImageOutcome] = field(default_factory=list)

    @property
    def written(self) -> list[Path]:
        return [outcome.path for outcome in self.outcomes if outcome.path is not None]

    @property
    def failures(self) -> list[ImageOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def exit_code(self) -> int:
        return 1 if self.failures or not self.outcomes else 0


def write_image(index: int, path: Path, data: bytes) -> Path:
    """Write ``data`` verbatim to ``path``, creating parent directories.

    Bytes go to a sibling ``.part`` file that is flushed, synced and then
    renamed over the target, so ``path`` never holds a truncated image. Any
    OS-level failure is raised as ``WriteError``.
    """

    partial = path.with_name(path.name + PARTIAL_SUFFIX)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(partial, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(partial, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            partial.unlink(missing_ok=True)
        raise WriteError(index, path, exc.strerror or str(exc)) from exc
    return path


def write_all(
    fetched: Iterable[tuple[int, bytes | FetchError]],
    spec: OutputSpec,
    total: int,
    *,
    emit_path: Callable[[Path], None] | None = None,
    report_error: Callable[[str], None] | None = None,
) -> RunReport:
    """Persist fetched images in index order and stream each committed path.

    ``fetched`` yields ``(index, data)`` pairs where ``data`` is either the
    image bytes or the ``FetchError`` that prevented retrieving them. A
    failure for one index is reported and the remaining images still proceed.
    """

    if emit_path is None:
        emit_path = diagnostics.emit_path
    if report_error is None:
        report_error = diagnostics.error

    paths = spec.paths(total)
    report = RunReport()
    for index, data in fetched:
        if isinstance(data, FetchError):
            report_error(str(data))
            report.outcomes.append(ImageOutcome(index=index, error=data))
            continue
        path = paths[index - 1]
        if path.exists():
            diagnostics.warning(f"overwriting existing file {path}")
        try:
            write_image(index, path, data)
        except WriteError as exc:
            report_error(str(exc))
            report.outcomes.append(ImageOutcome(index=index, error=exc))
            continue
        diagnostics.status(f"Saved: {path}")
        emit_path(path)
        report.outcomes.append(ImageOutcome(index=index, path=path))
    return report


__all__ = [
    "ImageOutcome",
    "OutputSpec",
    "RunReport",
    "write_all",
    "write_image",
]
