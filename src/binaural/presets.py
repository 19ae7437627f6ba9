from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from binaural.errors import InvalidArgumentError
from binaural.segments import BeatVariation


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    carrier_hz: float
    steps: Tuple[Tuple[float, float], ...]

    def variations(self) -> List[BeatVariation]:
        return [BeatVariation(beat_hz=b, duration_seconds=d) for b, d in self.steps]


_PRESETS: Dict[str, Preset] = {
    "default": Preset(
        name="default",
        description="Rising sweep from delta to gamma, 10s per step.",
        carrier_hz=2112,
        steps=((2, 10), (4, 10), (8, 10), (16, 10), (32, 10), (40, 10), (44, 10), (46, 10)),
    ),
    "relax": Preset(
        name="relax",
        description="Alpha settling into theta.",
        carrier_hz=200,
        steps=((10, 60), (8, 60), (6, 120)),
    ),
    "focus": Preset(
        name="focus",
        description="Steady low beta.",
        carrier_hz=300,
        steps=((14, 300),),
    ),
    "sleep": Preset(
        name="sleep",
        description="Theta down to delta.",
        carrier_hz=150,
        steps=((6, 120), (4, 180), (2, 300)),
    ),
}


def get_preset(name: str) -> Preset:
    n = (name or "").strip().lower() or "default"
    p = _PRESETS.get(n)
    if p is None:
        raise InvalidArgumentError(f"Unknown preset: {n}. Available: {', '.join(list_presets())}")
    return p


def list_presets() -> List[str]:
    return sorted(_PRESETS.keys())
