#!/usr/bin/env python3
"""
src/binaural/synth.py

Sine sample synthesis for one channel.

Contract:
- synthesize(sample_rate, frequency_hz, duration_seconds, volume, amplitude_scale)
  returns a restartable iterable of ints in [-32768, 32767]
- exactly sample_count(sample_rate, duration_seconds) samples are produced
- sample i = round_half_up(volume * amplitude_scale * sin(2*pi*f*i/sr))

Amplitude:
- LEGACY_AMPLITUDE_SCALE (127) reproduces the historical files, whose peak is
  about +/-102 at volume 0.8 even though the container declares 16-bit PCM.
- DEFAULT_AMPLITUDE_SCALE uses the full signed 16-bit range.
"""

from __future__ import annotations

import itertools
import math
from typing import Iterable, Iterator, Sequence

from binaural.errors import InvalidArgumentError
from binaural.segments import ToneSegment

INT16_MIN = -32768
INT16_MAX = 32767

LEGACY_AMPLITUDE_SCALE = 127
FULL_SCALE_AMPLITUDE = INT16_MAX
DEFAULT_AMPLITUDE_SCALE = FULL_SCALE_AMPLITUDE
DEFAULT_VOLUME = 0.8


def round_half_up(x: float) -> int:
    # round() is banker's rounding; the file format's history rounds .5 up.
    return int(math.floor(x + 0.5))


def sample_count(sample_rate: int, duration_seconds: float) -> int:
    return round_half_up(sample_rate * duration_seconds)


def validate_sample_rate(sample_rate: int) -> int:
    try:
        sr = int(sample_rate)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidArgumentError(f"sample_rate must be an integer (got {sample_rate!r})") from e
    if sr != sample_rate or sr <= 0:
        raise InvalidArgumentError(f"sample_rate must be a positive integer (got {sample_rate!r})")
    if sr > 0xFFFFFFFF:
        raise InvalidArgumentError(f"sample_rate does not fit in 32 bits (got {sr})")
    return sr


def _as_float(name: str, value: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} must be a number (got {value!r})") from e


def validate_volume(volume: float) -> float:
    v = _as_float("volume", volume)
    if not (0.0 <= v <= 1.0):
        raise InvalidArgumentError(f"volume must be in [0, 1] (got {volume!r})")
    return v


def validate_amplitude_scale(amplitude_scale: float) -> float:
    a = _as_float("amplitude_scale", amplitude_scale)
    if not (0.0 < a <= INT16_MAX):
        raise InvalidArgumentError(
            f"amplitude_scale must be in (0, {INT16_MAX}] (got {amplitude_scale!r})"
        )
    return a


class SineSamples:
    """
    Lazy, restartable sample sequence. Iterating twice yields the same values.
    """

    __slots__ = ("sample_rate", "frequency_hz", "count", "gain", "_step")

    def __init__(self, sample_rate: int, frequency_hz: float, count: int, gain: float) -> None:
        self.sample_rate = sample_rate
        self.frequency_hz = frequency_hz
        self.count = count
        self.gain = gain
        self._step = 2.0 * math.pi * frequency_hz / sample_rate

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[int]:
        step = self._step
        gain = self.gain
        if gain == 0.0:
            return itertools.repeat(0, self.count)
        return (
            max(INT16_MIN, min(INT16_MAX, round_half_up(gain * math.sin(step * i))))
            for i in range(self.count)
        )

    def __repr__(self) -> str:
        return (
            f"SineSamples(sample_rate={self.sample_rate}, frequency_hz={self.frequency_hz}, "
            f"count={self.count}, gain={self.gain})"
        )


def synthesize(
    sample_rate: int,
    frequency_hz: float,
    duration_seconds: float,
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
) -> SineSamples:
    sr = validate_sample_rate(sample_rate)
    seg = ToneSegment(frequency_hz=frequency_hz, duration_seconds=duration_seconds)
    gain = validate_volume(volume) * validate_amplitude_scale(amplitude_scale)
    return SineSamples(sr, seg.frequency_hz, sample_count(sr, seg.duration_seconds), gain)


def track_sample_count(sample_rate: int, segments: Iterable[ToneSegment]) -> int:
    """
    Total samples of a track. Each segment rounds on its own, so this can differ
    from sample_count(sample_rate, total_duration).
    """
    sr = validate_sample_rate(sample_rate)
    return sum(sample_count(sr, s.duration_seconds) for s in segments)


def render_track(
    sample_rate: int,
    segments: Sequence[ToneSegment],
    volume: float = DEFAULT_VOLUME,
    amplitude_scale: float = DEFAULT_AMPLITUDE_SCALE,
) -> Iterator[int]:
    parts = [
        synthesize(sample_rate, s.frequency_hz, s.duration_seconds, volume, amplitude_scale)
        for s in segments
    ]
    return itertools.chain.from_iterable(parts)


__all__ = [
    "INT16_MIN",
    "INT16_MAX",
    "LEGACY_AMPLITUDE_SCALE",
    "FULL_SCALE_AMPLITUDE",
    "DEFAULT_AMPLITUDE_SCALE",
    "DEFAULT_VOLUME",
    "SineSamples",
    "round_half_up",
    "sample_count",
    "synthesize",
    "render_track",
    "track_sample_count",
    "validate_sample_rate",
    "validate_volume",
    "validate_amplitude_scale",
]
