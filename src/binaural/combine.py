#!/usr/bin/env python3
"""
src/binaural/combine.py

Interleave two mono ".snd" files into one stereo file.

Contract:
- both inputs must be mono, 16-bit linear PCM, same sample rate, same length
- output frame i = left sample i followed by right sample i, bytes copied as-is
- output data_size = 4 * N for N mono samples
- the output is staged next to out_path and renamed into place, so out_path
  only ever holds a complete file

Both inputs are held in memory at once, so peak memory is about twice the
size of the stereo output.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple, Union

from binaural.au_format import BYTES_PER_SAMPLE, AuHeader, read_container
from binaural.errors import AudioIOError, InvalidArgumentError, MalformedInputError
from binaural.synth import sample_count, validate_sample_rate

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


def interleave_samples(left: bytes, right: bytes) -> bytes:
    """
    Pair 16-bit samples from two byte strings: L0 R0 L1 R1 ...
    """
    if len(left) != len(right):
        raise MalformedInputError(
            f"channel length mismatch: left {len(left)} bytes, right {len(right)} bytes"
        )
    if len(left) % BYTES_PER_SAMPLE:
        raise MalformedInputError(f"odd channel length {len(left)}")

    out = bytearray(len(left) * 2)
    # Slice assignment with a stride of 4 places each byte of every sample.
    out[0::4] = left[0::2]
    out[1::4] = left[1::2]
    out[2::4] = right[0::2]
    out[3::4] = right[1::2]
    return bytes(out)


def _load_mono(path: PathLike, side: str) -> Tuple[AuHeader, bytes]:
    header, data = read_container(path)
    if header.channels != 1:
        raise MalformedInputError(f"{side} input {path} has {header.channels} channels, expected 1")
    return header, data


def _atomic_write(path: Path, *parts: bytes) -> None:
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            for part in parts:
                f.write(part)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp)
        raise


def combine_sides(
    out_path: PathLike,
    left_path: PathLike,
    right_path: PathLike,
    sample_rate: Optional[int] = None,
    total_duration: Optional[float] = None,
) -> AuHeader:
    left_header, left = _load_mono(left_path, "left")
    right_header, right = _load_mono(right_path, "right")

    if left_header.sample_rate != right_header.sample_rate:
        raise MalformedInputError(
            f"sample rate mismatch: left {left_header.sample_rate} Hz, "
            f"right {right_header.sample_rate} Hz"
        )
    sr = left_header.sample_rate
    if sample_rate is not None and validate_sample_rate(sample_rate) != sr:
        raise InvalidArgumentError(
            f"requested sample rate {sample_rate} Hz but inputs are {sr} Hz"
        )

    frames = len(left) // BYTES_PER_SAMPLE
    if len(left) != len(right):
        raise MalformedInputError(
            f"channel length mismatch: {left_path} has {frames} samples, "
            f"{right_path} has {len(right) // BYTES_PER_SAMPLE}"
        )

    if total_duration is not None:
        expected = sample_count(sr, float(total_duration))
        if expected != frames:
            log.warning(
                "per-segment rounding gives %d frames, total duration %.6fs gives %d; using %d",
                frames,
                float(total_duration),
                expected,
                frames,
            )

    header = AuHeader.for_samples(frames, sr, channels=2)
    body = interleave_samples(left, right)

    out = Path(out_path)
    try:
        _atomic_write(out, header.pack(), body)
    except OSError as e:
        raise AudioIOError(f"cannot write {out}: {e}") from e

    log.info("combined %s + %s -> %s (%d frames)", left_path, right_path, out, frames)
    return header


__all__ = [
    "interleave_samples",
    "combine_sides",
]
