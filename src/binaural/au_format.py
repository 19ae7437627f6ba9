#!/usr/bin/env python3
"""
src/binaural/au_format.py

Sun/NeXT ".snd" container header, big-endian throughout.

Layout (6 x 32-bit words, then sample data):
  0  magic        ".snd"
  4  data_offset  24
  8  data_size    sample bytes that follow
  12 encoding     3 (16-bit linear PCM)
  16 sample_rate
  20 channels     1 or 2

Only encoding 3 with 1 or 2 channels is accepted when parsing.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Sequence, Tuple, Union

from binaural.errors import AudioIOError, InvalidArgumentError, MalformedInputError, NotFoundError

PathLike = Union[str, Path]

MAGIC = b".snd"
HEADER_SIZE = 24
ENCODING_LINEAR_16 = 3
BYTES_PER_SAMPLE = 2
UNKNOWN_DATA_SIZE = 0xFFFFFFFF

_HEADER = struct.Struct(">4sIIIII")
_SAMPLE = struct.Struct(">h")


@dataclass(frozen=True)
class AuHeader:
    data_size: int
    sample_rate: int
    channels: int
    data_offset: int = HEADER_SIZE
    encoding: int = ENCODING_LINEAR_16

    @classmethod
    def for_samples(cls, frames: int, sample_rate: int, channels: int) -> "AuHeader":
        """Header for `frames` sample frames of 16-bit PCM."""
        if channels not in (1, 2):
            raise InvalidArgumentError(f"channels must be 1 or 2 (got {channels})")
        return cls(
            data_size=frames * BYTES_PER_SAMPLE * channels,
            sample_rate=sample_rate,
            channels=channels,
        )

    @property
    def frame_size(self) -> int:
        return BYTES_PER_SAMPLE * self.channels

    @property
    def frames(self) -> int:
        return self.data_size // self.frame_size

    @property
    def duration_seconds(self) -> float:
        return self.frames / float(self.sample_rate) if self.sample_rate else 0.0

    def pack(self) -> bytes:
        try:
            return _HEADER.pack(
                MAGIC,
                self.data_offset,
                self.data_size,
                self.encoding,
                self.sample_rate,
                self.channels,
            )
        except struct.error as e:
            raise InvalidArgumentError(f"header field out of range: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "magic": MAGIC.decode("ascii"),
            "data_offset": self.data_offset,
            "data_size": self.data_size,
            "encoding": self.encoding,
            "sample_rate": self.sample_rate,
            "channels": self.channels,
            "frames": self.frames,
            "duration_seconds": round(self.duration_seconds, 6),
        }


def parse_header(data: bytes) -> AuHeader:
    if len(data) < HEADER_SIZE:
        raise MalformedInputError(f"header truncated: {len(data)} bytes, need {HEADER_SIZE}")

    magic, offset, size, encoding, rate, channels = _HEADER.unpack_from(data, 0)
    if magic != MAGIC:
        raise MalformedInputError(f"bad magic {magic!r}, expected {MAGIC!r}")
    if offset < HEADER_SIZE:
        raise MalformedInputError(f"data_offset {offset} is smaller than the header")
    if encoding != ENCODING_LINEAR_16:
        raise MalformedInputError(f"unsupported encoding {encoding} (only 16-bit linear PCM)")
    if channels not in (1, 2):
        raise MalformedInputError(f"unsupported channel count {channels}")
    if rate == 0:
        raise MalformedInputError("sample_rate is 0")

    return AuHeader(
        data_size=size,
        sample_rate=rate,
        channels=channels,
        data_offset=offset,
        encoding=encoding,
    )


def _read_bytes(path: PathLike) -> bytes:
    p = Path(path)
    try:
        return p.read_bytes()
    except FileNotFoundError as e:
        raise NotFoundError(f"container not found: {p}") from e
    except IsADirectoryError as e:
        raise AudioIOError(f"expected a file, got a directory: {p}") from e
    except OSError as e:
        raise AudioIOError(f"cannot read {p}: {e}") from e


def read_header(path: PathLike) -> AuHeader:
    p = Path(path)
    try:
        with p.open("rb") as f:
            head = f.read(HEADER_SIZE)
    except FileNotFoundError as e:
        raise NotFoundError(f"container not found: {p}") from e
    except OSError as e:
        raise AudioIOError(f"cannot read {p}: {e}") from e
    return parse_header(head)


def split_container(raw: bytes) -> Tuple[AuHeader, bytes]:
    """
    Split a whole file into (header, sample data).

    Bytes between 24 and data_offset (the annotation field) are skipped.
    Trailing bytes beyond data_size are ignored.
    """
    header = parse_header(raw)
    body = raw[header.data_offset:]
    if len(raw) < header.data_offset:
        raise MalformedInputError(
            f"data_offset {header.data_offset} points past end of file ({len(raw)} bytes)"
        )

    if header.data_size == UNKNOWN_DATA_SIZE:
        header = AuHeader(
            data_size=len(body),
            sample_rate=header.sample_rate,
            channels=header.channels,
            data_offset=header.data_offset,
            encoding=header.encoding,
        )
    elif len(body) < header.data_size:
        raise MalformedInputError(
            f"sample data truncated: header declares {header.data_size} bytes, found {len(body)}"
        )
    else:
        body = body[: header.data_size]

    if len(body) % header.frame_size:
        raise MalformedInputError(
            f"sample data length {len(body)} is not a multiple of the frame size {header.frame_size}"
        )
    return header, body


def read_container(path: PathLike) -> Tuple[AuHeader, bytes]:
    raw = _read_bytes(path)
    try:
        return split_container(raw)
    except MalformedInputError as e:
        raise MalformedInputError(f"{path}: {e}") from e


def iter_samples(data: bytes) -> Iterator[int]:
    if len(data) % BYTES_PER_SAMPLE:
        raise MalformedInputError(f"odd sample data length {len(data)}")
    for (v,) in _SAMPLE.iter_unpack(data):
        yield v


def pack_samples(samples: Sequence[int]) -> bytes:
    return struct.pack(f">{len(samples)}h", *samples)


__all__ = [
    "MAGIC",
    "HEADER_SIZE",
    "ENCODING_LINEAR_16",
    "BYTES_PER_SAMPLE",
    "UNKNOWN_DATA_SIZE",
    "AuHeader",
    "parse_header",
    "read_header",
    "split_container",
    "read_container",
    "iter_samples",
    "pack_samples",
]
