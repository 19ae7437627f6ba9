from __future__ import annotations

import pytest

from binaural.errors import InvalidArgumentError
from binaural.presets import get_preset, list_presets
from binaural.segments import (
    BeatVariation,
    ToneSegment,
    as_variations,
    parse_variation,
    split_tracks,
    total_duration,
)


def test_split_tracks_left_is_upper():
    left, right = split_tracks(2112, [(2, 10), (4, 5)])
    assert left == [ToneSegment(2113.0, 10.0), ToneSegment(2114.0, 5.0)]
    assert right == [ToneSegment(2111.0, 10.0), ToneSegment(2110.0, 5.0)]
    assert total_duration(left) == total_duration(right) == 15.0


def test_split_tracks_accepts_variations():
    left, right = split_tracks(100.0, [BeatVariation(10.0, 1.0)])
    assert left[0].frequency_hz == 105.0
    assert right[0].frequency_hz == 95.0


@pytest.mark.parametrize(
    "carrier,variations",
    [
        (float("inf"), [(2, 1)]),
        (100, [(2, -1)]),
        (100, [(float("nan"), 1)]),
        (100, [(2, 1, 3)]),
    ],
)
def test_split_tracks_rejects(carrier, variations):
    with pytest.raises(InvalidArgumentError):
        split_tracks(carrier, variations)


def test_split_tracks_allows_beats_wider_than_carrier():
    left, right = split_tracks(10, [(30, 1)])
    assert left == [ToneSegment(25.0, 1.0)]
    assert right == [ToneSegment(-5.0, 1.0)]


def test_zero_and_negative_frequencies_are_valid():
    assert ToneSegment(0.0, 1.0).frequency_hz == 0.0
    assert ToneSegment(-440.0, 1.0).frequency_hz == -440.0
    left, right = split_tracks(0, [(4, 1)])
    assert (left[0].frequency_hz, right[0].frequency_hz) == (2.0, -2.0)


def test_segments_are_frozen():
    seg = ToneSegment(100.0, 1.0)
    with pytest.raises(AttributeError):
        seg.frequency_hz = 200.0  # type: ignore[misc]


@pytest.mark.parametrize(
    "text,want",
    [("2:10", BeatVariation(2.0, 10.0)), (" 7.83 : 30 ", BeatVariation(7.83, 30.0)), ("4:0", BeatVariation(4.0, 0.0))],
)
def test_parse_variation(text, want):
    assert parse_variation(text) == want


@pytest.mark.parametrize("text", ["", "2", "2:", ":10", "a:b", "2:-1"])
def test_parse_variation_rejects(text):
    with pytest.raises(InvalidArgumentError):
        parse_variation(text)


def test_as_variations_passthrough():
    v = BeatVariation(1.0, 2.0)
    assert as_variations([v, (3, 4)]) == [v, BeatVariation(3.0, 4.0)]


def test_default_preset_is_original_sweep():
    p = get_preset("default")
    assert p.carrier_hz == 2112
    assert [v.beat_hz for v in p.variations()] == [2, 4, 8, 16, 32, 40, 44, 46]
    assert total_duration(p.variations()) == 80.0


def test_presets_listing_and_unknown():
    assert "default" in list_presets()
    assert get_preset("") is get_preset("default")
    with pytest.raises(InvalidArgumentError, match="Unknown preset"):
        get_preset("nope")
