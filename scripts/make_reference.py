#!/usr/bin/env python3
"""
scripts/make_reference.py

Render the historical reference file: carrier 2112 Hz, the "default" sweep,
16 kHz, peak scale 127 at volume 0.8.

Usage:
  python scripts/make_reference.py --out test.au
  python scripts/make_reference.py --out test.au --full-scale

Exit codes:
  0 = written
  1 = failed (stage and cause printed)
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from binaural.errors import StageError
from binaural.pipeline import make_binaural
from binaural.presets import get_preset
from binaural.synth import FULL_SCALE_AMPLITUDE, LEGACY_AMPLITUDE_SCALE


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=True)
    p.add_argument("--out", default="test.au", help="Output path (default: test.au)")
    p.add_argument("--sample-rate", type=int, default=16000)
    p.add_argument("--full-scale", action="store_true", help="Use the 16-bit peak instead of 127")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    preset = get_preset("default")

    try:
        res = make_binaural(
            preset.carrier_hz,
            preset.variations(),
            args.out,
            sample_rate=args.sample_rate,
            amplitude_scale=FULL_SCALE_AMPLITUDE if args.full_scale else LEGACY_AMPLITUDE_SCALE,
        )
    except StageError as e:
        print(f"[make_reference] FAIL: {e.stage}: {e.cause}")
        return 1

    print("[make_reference] OK")
    print(f"  out:    {res.out_path}")
    print(f"  frames: {res.header.frames}")
    print(f"  bytes:  {res.file_size}")
    print(f"  sha256: {res.sha256}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
