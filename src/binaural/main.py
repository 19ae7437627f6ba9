#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

from binaural.au_format import HEADER_SIZE, read_container
from binaural.combine import combine_sides
from binaural.config import Settings, parse_amplitude_scale
from binaural.errors import AudioIOError, BinauralError, InvalidArgumentError, StageError
from binaural.logging_setup import setup_logging
from binaural.pipeline import make_binaural, render_stereo
from binaural.presets import get_preset, list_presets
from binaural.segments import BeatVariation, parse_variation
from binaural.synth import LEGACY_AMPLITUDE_SCALE

log = logging.getLogger("binaural.cli")


# ----------------------------
# basic utils
# ----------------------------

def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def emit(args: argparse.Namespace, payload: Any, text: str) -> None:
    if getattr(args, "json", False):
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(text)


def _settings(args: argparse.Namespace) -> Settings:
    s: Settings = args.settings
    return s


def _amplitude(args: argparse.Namespace) -> float:
    if getattr(args, "legacy_amplitude", False):
        return float(LEGACY_AMPLITUDE_SCALE)
    if getattr(args, "amplitude_scale", None):
        return parse_amplitude_scale(args.amplitude_scale)
    return _settings(args).amplitude_scale


# ----------------------------
# commands
# ----------------------------

def make_cmd(args: argparse.Namespace) -> int:
    s = _settings(args)

    beats: List[BeatVariation] = [parse_variation(b) for b in (args.beat or [])]
    carrier = args.carrier
    if args.preset:
        if beats:
            raise InvalidArgumentError("use either --preset or --beat, not both")
        preset = get_preset(args.preset)
        beats = preset.variations()
        if carrier is None:
            carrier = preset.carrier_hz
    if not beats:
        raise InvalidArgumentError("at least one --beat BEAT:SECONDS (or --preset) is required")
    if carrier is None:
        raise InvalidArgumentError("--carrier is required unless a preset supplies one")

    kwargs = dict(
        sample_rate=args.sample_rate if args.sample_rate is not None else s.sample_rate,
        volume=args.volume if args.volume is not None else s.volume,
        amplitude_scale=_amplitude(args),
    )
    if args.single_pass:
        result = render_stereo(carrier, beats, args.out, **kwargs)
    else:
        result = make_binaural(carrier, beats, args.out, work_dir=args.work_dir, **kwargs)

    emit(
        args,
        result.to_dict(),
        f"{result.out_path}: {result.header.frames} frames @ {result.header.sample_rate} Hz, "
        f"{result.file_size} bytes, sha256={result.sha256}",
    )
    return 0


def combine_cmd(args: argparse.Namespace) -> int:
    try:
        header = combine_sides(
            args.out,
            args.left,
            args.right,
            sample_rate=args.sample_rate,
            total_duration=args.duration,
        )
    except BinauralError as e:
        raise StageError("combine", e, args.out) from e

    payload = {"out_path": args.out, **header.to_dict(), "file_size": HEADER_SIZE + header.data_size}
    emit(args, payload, f"{args.out}: {header.frames} frames, {HEADER_SIZE + header.data_size} bytes")
    return 0


def info_cmd(args: argparse.Namespace) -> int:
    try:
        header, _data = read_container(args.path)
    except BinauralError as e:
        raise StageError("read", e, args.path) from e

    payload = {"path": args.path, **header.to_dict()}
    if getattr(args, "json", False):
        emit(args, payload, "")
        return 0
    for k, v in payload.items():
        print(f"{k:<17} {v}")
    return 0


def presets_cmd(args: argparse.Namespace) -> int:
    rows = []
    for name in list_presets():
        p = get_preset(name)
        rows.append(
            {
                "name": p.name,
                "carrier_hz": p.carrier_hz,
                "steps": [list(step) for step in p.steps],
                "description": p.description,
            }
        )
    emit(
        args,
        rows,
        "\n".join(f"{r['name']:<10} {r['carrier_hz']:>7} Hz  {r['description']}" for r in rows),
    )
    return 0


# ----------------------------
# parser
# ----------------------------

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="binaural", description="Binaural beat synthesizer (.snd/.au output)")
    p.add_argument("--env", default=".env", help="Path to .env (default: .env)")
    p.add_argument("--log-level", default=None, help="Logging level (default: BINAURAL_LOG_LEVEL or INFO)")
    p.add_argument("--log-dir", default=None, help="Also write binaural.log into this directory")
    p.add_argument("--json", action="store_true", help="Machine-readable output")

    sub = p.add_subparsers(dest="cmd", required=True)

    mk = sub.add_parser("make", help="Render a stereo binaural beat file")
    mk.add_argument("--carrier", type=float, default=None, help="Carrier frequency in Hz")
    mk.add_argument(
        "--beat",
        action="append",
        default=[],
        metavar="BEAT:SECONDS",
        help="Beat frequency and duration; repeat for a sequence",
    )
    mk.add_argument("--preset", default=None, help=f"Named progression ({', '.join(list_presets())})")
    mk.add_argument("--out", required=True, help="Output .au path")
    mk.add_argument("--sample-rate", type=int, default=None)
    mk.add_argument("--volume", type=float, default=None)
    amp = mk.add_mutually_exclusive_group()
    amp.add_argument("--amplitude-scale", default=None, help='Peak scale: number, "full" or "legacy"')
    amp.add_argument(
        "--legacy-amplitude",
        action="store_true",
        help=f"Use the historical {LEGACY_AMPLITUDE_SCALE} peak scale",
    )
    mk.add_argument("--work-dir", default=None, help="Keep the mono side files here")
    mk.add_argument("--single-pass", action="store_true", help="Write stereo directly, no side files")
    mk.set_defaults(func=make_cmd)

    cb = sub.add_parser("combine", help="Interleave two mono .au files into stereo")
    cb.add_argument("--left", required=True)
    cb.add_argument("--right", required=True)
    cb.add_argument("--out", required=True)
    cb.add_argument("--sample-rate", type=int, default=None)
    cb.add_argument("--duration", type=float, default=None, help="Expected total duration in seconds")
    cb.set_defaults(func=combine_cmd)

    inf = sub.add_parser("info", help="Show the header of an .au file")
    inf.add_argument("path")
    inf.set_defaults(func=info_cmd)

    ps = sub.add_parser("presets", help="List named beat progressions")
    ps.set_defaults(func=presets_cmd)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv(args.env)

    try:
        args.settings = Settings.from_env()
    except BinauralError as e:
        eprint(f"config: {e}")
        return e.exit_code

    level = args.log_level or args.settings.log_level
    log_dir = Path(args.log_dir) if args.log_dir else args.settings.log_dir
    try:
        setup_logging(level=level, log_dir=log_dir)
    except OSError as e:
        eprint(f"config: cannot set up logging in {log_dir}: {e}")
        return AudioIOError.exit_code

    try:
        return int(args.func(args))
    except StageError as e:
        log.error("%s failed: %s", e.stage, e.cause)
        return e.exit_code
    except BinauralError as e:
        log.error("%s: %s", args.cmd, e)
        return e.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
