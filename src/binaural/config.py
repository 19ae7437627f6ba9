# src/binaural/config.py
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from binaural.errors import InvalidArgumentError
from binaural.synth import (
    DEFAULT_AMPLITUDE_SCALE,
    DEFAULT_VOLUME,
    LEGACY_AMPLITUDE_SCALE,
    validate_amplitude_scale,
    validate_sample_rate,
    validate_volume,
)

DEFAULT_SAMPLE_RATE = 16000


def parse_amplitude_scale(text: str) -> float:
    """
    "legacy" -> 127, "full" -> 32767, otherwise a number in (0, 32767].
    """
    s = (text or "").strip().lower()
    if s == "legacy":
        return float(LEGACY_AMPLITUDE_SCALE)
    if s in ("full", "default"):
        return float(DEFAULT_AMPLITUDE_SCALE)
    try:
        value = float(s)
    except ValueError as e:
        raise InvalidArgumentError(f"invalid amplitude scale: {text!r}") from e
    return validate_amplitude_scale(value)


def _env_number(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise InvalidArgumentError(f"{key} must be a number (got {raw!r})") from e
    if not math.isfinite(value):
        raise InvalidArgumentError(f"{key} must be finite (got {raw!r})")
    return value


@dataclass(frozen=True)
class Settings:
    sample_rate: int = DEFAULT_SAMPLE_RATE
    volume: float = DEFAULT_VOLUME
    amplitude_scale: float = float(DEFAULT_AMPLITUDE_SCALE)
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Env:
          BINAURAL_SAMPLE_RATE      samples per second (default 16000)
          BINAURAL_VOLUME           0..1 (default 0.8)
          BINAURAL_AMPLITUDE_SCALE  number, "full" or "legacy"
          BINAURAL_LOG_LEVEL        logging level name (default INFO)
          BINAURAL_LOG_DIR          also log to <dir>/binaural.log
        """
        e = os.environ if env is None else env

        rate = _env_number(e, "BINAURAL_SAMPLE_RATE", DEFAULT_SAMPLE_RATE)
        if rate != int(rate):
            raise InvalidArgumentError(f"BINAURAL_SAMPLE_RATE must be an integer (got {rate})")
        volume = _env_number(e, "BINAURAL_VOLUME", DEFAULT_VOLUME)

        amp_raw = (e.get("BINAURAL_AMPLITUDE_SCALE") or "").strip()
        amplitude = parse_amplitude_scale(amp_raw) if amp_raw else float(DEFAULT_AMPLITUDE_SCALE)

        log_dir_raw = (e.get("BINAURAL_LOG_DIR") or "").strip()

        return cls(
            sample_rate=validate_sample_rate(int(rate)),
            volume=validate_volume(volume),
            amplitude_scale=amplitude,
            log_level=(e.get("BINAURAL_LOG_LEVEL") or "INFO").strip().upper() or "INFO",
            log_dir=Path(log_dir_raw).expanduser() if log_dir_raw else None,
        )
