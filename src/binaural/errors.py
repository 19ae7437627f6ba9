# src/binaural/errors.py
from __future__ import annotations

from typing import Optional


class BinauralError(RuntimeError):
    """Base for every failure raised by the synthesis/container code."""

    exit_code = 1


class InvalidArgumentError(BinauralError, ValueError):
    """Bad sample rate, duration, volume, frequency or channel layout."""

    exit_code = 2


class NotFoundError(BinauralError, FileNotFoundError):
    exit_code = 3


class MalformedInputError(BinauralError, ValueError):
    """Short/invalid header, or mono channels that cannot be interleaved."""

    exit_code = 4


class AudioIOError(BinauralError, OSError):
    exit_code = 5


class StageError(BinauralError):
    """Wraps a failure with the pipeline stage that raised it."""

    def __init__(self, stage: str, cause: BaseException, path: Optional[str] = None) -> None:
        self.stage = stage
        self.cause = cause
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"{stage} failed{where}: {cause}")

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return int(getattr(self.cause, "exit_code", 1))


__all__ = [
    "BinauralError",
    "InvalidArgumentError",
    "NotFoundError",
    "MalformedInputError",
    "AudioIOError",
    "StageError",
]
