#!/usr/bin/env python3
"""
src/binaural/pipeline.py

carrier + [(beat, seconds), ...] -> stereo ".snd" file.

Stages:
  synthesis   derive the two tracks (carrier +/- beat/2) and validate them
  mono-write  render each track to its own mono container
  combine     interleave the two mono containers into the output

Any failure is re-raised as StageError naming the stage. A mono-write failure
stops the run before combine. Intermediate files live in a temporary
directory that is removed on every exit path, unless work_dir is given.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Union

from binaural.au_format import HEADER_SIZE, AuHeader
from binaural.combine import combine_sides
from binaural.errors import AudioIOError, BinauralError, StageError
from binaural.segments import VariationLike, as_variations, split_tracks, total_duration
from binaural.synth import (
    DEFAULT_AMPLITUDE_SCALE,
    DEFAULT_VOLUME,
    track_sample_count,
    validate_amplitude_scale,
    validate_sample_rate,
    validate_volume,
)
from binaural.writer import write_file, write_track_file

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_SAMPLE_RATE = 16000
LEFT_NAME = "side1.au"
RIGHT_NAME = "side2.au"


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(1024 * 1024), b""):
                h.update(chunk)
    except OSError as e:
        raise AudioIOError(f"cannot hash {path}: {e}") from e
    return h.hexdigest()


@dataclass(frozen=True)
class BinauralResult:
    out_path: Path
    header: AuHeader
    carrier_hz: float
    segments: int
    total_duration: float
    sha256: str

    @property
    def file_size(self) -> int:
        return HEADER_SIZE + self.header.data_size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "out_path": str(self.out_path),
            "carrier_hz": self.carrier_hz,
            "segments": self.segments,
            "total_duration": self.total_duration,
            "sample_rate": self.header.sample_rate,
            "channels": self.header.channels,
            "frames": self.header.frames,
            "data_size": self.header.data_size,
            "file_size": self.file_size,
            "sha256": self.sha256,
        }


@contextlib.contextmanager
def _stage(name: str, path: Optional[Path] = None) -> Iterator[None]:
    try:
        yield
    except StageError:
        raise
    except BinauralError as e:
        raise StageError(name, e, str(path) if path else None) from e


@contextlib.contextmanager
def _work_dir(work_dir: Optional[PathLike]) -> Iterator[Path]:
    if work_dir is not None:
        p = Path(work_dir)
        try:
            p.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            err = AudioIOError(f"cannot create work dir {p}: {e}")
            raise StageError("mono-write", err, str(p)) from e
        yield p
        return
    with tempfile.TemporaryDirectory(prefix="binaural_") as td:
        yield Path(td)


def _result(
    out: Path,
    header: AuHeader,
    carrier_hz: float,
    segments: int,
    duration: float,
) -> BinauralResult:
    return BinauralResult(
        out_path=out,
        header=header,
        carrier_hz=float(carrier_hz),
        segments=segments,
        total_duration=duration,
        sha256=_sha256_file(out),
    )


def make_binaural(
    carrier_hz: float,
    variations: Iterable[VariationLike],
    out_path: PathLike,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
    work_dir: Optional[PathLike] = None,
) -> BinauralResult:
    out = Path(out_path)

    with _stage("synthesis"):
        steps = as_variations(variations)
        left, right = split_tracks(carrier_hz, steps)
        sr = validate_sample_rate(sample_rate)
        vol = validate_volume(volume)
        amp = validate_amplitude_scale(amplitude_scale)
        duration = total_duration(steps)

    log.info(
        "binaural: carrier=%s Hz, %d segments, %.3fs @ %d Hz, volume=%s, amplitude_scale=%s",
        carrier_hz,
        len(steps),
        duration,
        sr,
        vol,
        amp,
    )

    with _work_dir(work_dir) as wd:
        left_path = wd / LEFT_NAME
        right_path = wd / RIGHT_NAME

        with _stage("mono-write", left_path):
            write_track_file(left_path, left, sr, vol, amp)
        with _stage("mono-write", right_path):
            write_track_file(right_path, right, sr, vol, amp)

        with _stage("combine", out):
            header = combine_sides(out, left_path, right_path, sr, duration)
            return _result(out, header, carrier_hz, len(steps), duration)


def render_stereo(
    carrier_hz: float,
    variations: Iterable[VariationLike],
    out_path: PathLike,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
) -> BinauralResult:
    """
    Same output as make_binaural, written in one pass without mono intermediates.
    """
    out = Path(out_path)

    with _stage("synthesis"):
        steps = as_variations(variations)
        left, right = split_tracks(carrier_hz, steps)
        sr = validate_sample_rate(sample_rate)
        vol = validate_volume(volume)
        amp = validate_amplitude_scale(amplitude_scale)
        duration = total_duration(steps)
        log.debug("single-pass render: %d frames", track_sample_count(sr, left))

    with _stage("stereo-write", out):
        header = write_file(out, [left, right], sr, vol, amp)
        return _result(out, header, carrier_hz, len(steps), duration)


__all__ = [
    "DEFAULT_SAMPLE_RATE",
    "BinauralResult",
    "make_binaural",
    "render_stereo",
]
