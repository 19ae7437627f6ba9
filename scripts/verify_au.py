#!/usr/bin/env python3
"""
scripts/verify_au.py

Check that .au files are well-formed 16-bit PCM containers whose declared
data_size matches the bytes on disk.

Usage:
  python scripts/verify_au.py out/*.au [--channels 2]

Exit codes:
  0 = all files OK
  3 = at least one file malformed, mismatched or unreadable
  4 = a file is missing
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from binaural.au_format import read_container
from binaural.errors import AudioIOError, MalformedInputError, NotFoundError


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=True)
    p.add_argument("paths", nargs="+", help="Files to check")
    p.add_argument("--channels", type=int, choices=(1, 2), default=None, help="Required channel count")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    rc = 0

    for raw in args.paths:
        path = Path(raw)
        try:
            header, data = read_container(path)
        except NotFoundError:
            print(f"[verify_au] FAIL: missing: {path}")
            rc = max(rc, 4)
            continue
        except (MalformedInputError, AudioIOError) as e:
            print(f"[verify_au] FAIL: {e}")
            rc = max(rc, 3)
            continue

        size = path.stat().st_size
        if args.channels is not None and header.channels != args.channels:
            print(f"[verify_au] FAIL: {path}: {header.channels} channels, expected {args.channels}")
            rc = max(rc, 3)
            continue
        if size != header.data_offset + header.data_size:
            print(f"[verify_au] FAIL: {path}: {size} bytes on disk, header implies "
                  f"{header.data_offset + header.data_size}")
            rc = max(rc, 3)
            continue

        print(f"[verify_au] OK {path}")
        print(f"  channels:    {header.channels}")
        print(f"  sample_rate: {header.sample_rate}")
        print(f"  frames:      {header.frames}")
        print(f"  seconds:     {header.duration_seconds:.3f}")
        print(f"  bytes:       {header.data_offset + len(data)}")

    return rc


if __name__ == "__main__":
    raise SystemExit(main())
