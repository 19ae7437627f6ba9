"""
src/binaural/__init__.py

Binaural beat synthesis into big-endian ".snd"/".au" containers.

  from binaural import make_binaural
  make_binaural(2112, [(2, 10), (4, 10)], "out.au", sample_rate=16000)
"""

from __future__ import annotations

from binaural.au_format import AuHeader, parse_header, read_container, read_header
from binaural.combine import combine_sides
from binaural.errors import (
    AudioIOError,
    BinauralError,
    InvalidArgumentError,
    MalformedInputError,
    NotFoundError,
    StageError,
)
from binaural.pipeline import BinauralResult, make_binaural, render_stereo
from binaural.segments import BeatVariation, ToneSegment, split_tracks
from binaural.synth import synthesize
from binaural.writer import write_container, write_track_file

__version__ = "0.1.0"

__all__ = [
    "AuHeader",
    "AudioIOError",
    "BeatVariation",
    "BinauralError",
    "BinauralResult",
    "InvalidArgumentError",
    "MalformedInputError",
    "NotFoundError",
    "StageError",
    "ToneSegment",
    "combine_sides",
    "make_binaural",
    "parse_header",
    "read_container",
    "read_header",
    "render_stereo",
    "split_tracks",
    "synthesize",
    "write_container",
    "write_track_file",
]
