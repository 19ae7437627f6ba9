# src/binaural/segments.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

from binaural.errors import InvalidArgumentError


def _check_finite(name: str, value: float) -> float:
    v = float(value)
    if not math.isfinite(v):
        raise InvalidArgumentError(f"{name} must be a finite number (got {value!r})")
    return v


@dataclass(frozen=True)
class ToneSegment:
    """
    A constant-frequency stretch of one channel. Zero or negative frequencies
    are allowed; sin is odd, so a negative frequency is a phase-inverted tone.
    """

    frequency_hz: float
    duration_seconds: float

    def __post_init__(self) -> None:
        f = _check_finite("frequency_hz", self.frequency_hz)
        d = _check_finite("duration_seconds", self.duration_seconds)
        if d < 0:
            raise InvalidArgumentError(f"duration_seconds must be >= 0 (got {d})")
        object.__setattr__(self, "frequency_hz", f)
        object.__setattr__(self, "duration_seconds", d)


@dataclass(frozen=True)
class BeatVariation:
    """One (beat frequency, duration) pair as supplied by the caller."""

    beat_hz: float
    duration_seconds: float

    def __post_init__(self) -> None:
        b = _check_finite("beat_hz", self.beat_hz)
        d = _check_finite("duration_seconds", self.duration_seconds)
        if d < 0:
            raise InvalidArgumentError(f"duration_seconds must be >= 0 (got {d})")
        object.__setattr__(self, "beat_hz", b)
        object.__setattr__(self, "duration_seconds", d)


VariationLike = Union[BeatVariation, Tuple[float, float], Sequence[float]]


def as_variations(items: Iterable[VariationLike]) -> List[BeatVariation]:
    out: List[BeatVariation] = []
    for it in items:
        if isinstance(it, BeatVariation):
            out.append(it)
            continue
        if len(it) != 2:
            raise InvalidArgumentError(f"variation must be (beat_hz, seconds), got {it!r}")
        out.append(BeatVariation(beat_hz=it[0], duration_seconds=it[1]))
    return out


def parse_variation(text: str) -> BeatVariation:
    """
    Parse "BEAT:SECONDS" (e.g. "4:10" or "7.83:30").
    """
    s = (text or "").strip()
    beat, sep, secs = s.partition(":")
    if not sep or not beat.strip() or not secs.strip():
        raise InvalidArgumentError(f"expected BEAT:SECONDS, got {text!r}")
    try:
        beat_hz, seconds = float(beat), float(secs)
    except ValueError as e:
        raise InvalidArgumentError(f"expected BEAT:SECONDS, got {text!r}") from e
    return BeatVariation(beat_hz=beat_hz, duration_seconds=seconds)


def split_tracks(
    carrier_hz: float,
    variations: Iterable[VariationLike],
) -> Tuple[List[ToneSegment], List[ToneSegment]]:
    """
    Derive the two channel tracks: left = carrier + beat/2, right = carrier - beat/2.
    """
    carrier = _check_finite("carrier_hz", carrier_hz)

    left: List[ToneSegment] = []
    right: List[ToneSegment] = []
    for v in as_variations(variations):
        half = v.beat_hz / 2.0
        left.append(ToneSegment(frequency_hz=carrier + half, duration_seconds=v.duration_seconds))
        right.append(ToneSegment(frequency_hz=carrier - half, duration_seconds=v.duration_seconds))
    return left, right


def total_duration(segments: Iterable[Union[ToneSegment, BeatVariation]]) -> float:
    return float(sum(s.duration_seconds for s in segments))


__all__ = [
    "ToneSegment",
    "BeatVariation",
    "as_variations",
    "parse_variation",
    "split_tracks",
    "total_duration",
]
