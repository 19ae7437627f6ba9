#!/usr/bin/env python3
"""
src/binaural/writer.py

Write a 16-bit linear PCM ".snd" container from segment lists.

Contract:
- write_container(sink, tracks, sample_rate, ...) writes header + samples to an
  open binary sink and returns the header it wrote
- one track -> mono; two tracks -> stereo, interleaved L,R per frame
- data_size is derived from the same segment lists that drive synthesis, and
  the byte count actually written must match it
- segments follow each other with no gap; each segment rounds its own length
"""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import BinaryIO, Iterator, List, Sequence, Tuple, Union

from binaural.au_format import HEADER_SIZE, AuHeader, pack_samples
from binaural.errors import AudioIOError, BinauralError, InvalidArgumentError
from binaural.segments import ToneSegment
from binaural.synth import (
    DEFAULT_AMPLITUDE_SCALE,
    DEFAULT_VOLUME,
    render_track,
    track_sample_count,
    validate_sample_rate,
)

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

# samples per struct.pack call
CHUNK_SAMPLES = 8192


def _chunks(samples: Iterator[int], size: int) -> Iterator[List[int]]:
    while True:
        chunk = list(itertools.islice(samples, size))
        if not chunk:
            return
        yield chunk


def _interleave(left: Iterator[int], right: Iterator[int]) -> Iterator[int]:
    for a, b in zip(left, right):
        yield a
        yield b


def _prepare(
    tracks: Sequence[Sequence[ToneSegment]],
    sample_rate: int,
    volume: float,
    amplitude_scale: float,
) -> Tuple[AuHeader, Iterator[int]]:
    channels = len(tracks)
    if channels not in (1, 2):
        raise InvalidArgumentError(f"expected 1 or 2 tracks, got {channels}")
    sr = validate_sample_rate(sample_rate)

    counts = [track_sample_count(sr, t) for t in tracks]
    if len(set(counts)) != 1:
        raise InvalidArgumentError(
            f"stereo tracks differ in length: {counts[0]} vs {counts[1]} samples"
        )
    header = AuHeader.for_samples(counts[0], sr, channels)

    # Every segment is validated here, before anything reaches the sink.
    streams = [render_track(sr, t, volume, amplitude_scale) for t in tracks]
    samples = streams[0] if channels == 1 else _interleave(streams[0], streams[1])
    return header, samples


def _emit(sink: BinaryIO, header: AuHeader, samples: Iterator[int]) -> AuHeader:
    written = 0
    try:
        sink.write(header.pack())
        for chunk in _chunks(samples, CHUNK_SAMPLES):
            data = pack_samples(chunk)
            sink.write(data)
            written += len(data)
    except BinauralError:
        raise
    except OSError as e:
        raise AudioIOError(f"write failed after {written} sample bytes: {e}") from e

    if written != header.data_size:
        raise AudioIOError(
            f"wrote {written} sample bytes but header declares {header.data_size}"
        )
    log.debug(
        "wrote container: channels=%d sample_rate=%d frames=%d data_size=%d",
        header.channels,
        header.sample_rate,
        header.frames,
        header.data_size,
    )
    return header


def write_container(
    sink: BinaryIO,
    tracks: Sequence[Sequence[ToneSegment]],
    sample_rate: int,
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
) -> AuHeader:
    header, samples = _prepare(tracks, sample_rate, volume, amplitude_scale)
    return _emit(sink, header, samples)


def write_track_file(
    path: PathLike,
    segments: Sequence[ToneSegment],
    sample_rate: int,
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
) -> AuHeader:
    """
    Render one mono track to `path`. A failed write may leave a partial file.
    """
    return write_file(path, [segments], sample_rate, volume, amplitude_scale)


def write_file(
    path: PathLike,
    tracks: Sequence[Sequence[ToneSegment]],
    sample_rate: int,
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
) -> AuHeader:
    """
    Write one container to `path`. Arguments are validated before the file is
    opened, so a rejected call leaves any existing file untouched.
    """
    p = Path(path)
    header, samples = _prepare(tracks, sample_rate, volume, amplitude_scale)
    try:
        with p.open("wb") as f:
            _emit(f, header, samples)
    except BinauralError:
        raise
    except OSError as e:
        raise AudioIOError(f"cannot write {p}: {e}") from e

    log.info(
        "wrote %s (%d ch, %d Hz, %d bytes)",
        p,
        header.channels,
        header.sample_rate,
        HEADER_SIZE + header.data_size,
    )
    return header


__all__ = [
    "CHUNK_SAMPLES",
    "write_container",
    "write_file",
    "write_track_file",
]
