from __future__ import annotations

import logging

import pytest

from binaural.config import DEFAULT_SAMPLE_RATE, Settings, parse_amplitude_scale
from binaural.errors import InvalidArgumentError
from binaural.logging_setup import setup_logging


def test_defaults_from_empty_env():
    s = Settings.from_env({})
    assert s.sample_rate == DEFAULT_SAMPLE_RATE == 16000
    assert s.volume == 0.8
    assert s.amplitude_scale == 32767.0
    assert s.log_level == "INFO"
    assert s.log_dir is None


def test_values_from_env(tmp_path):
    s = Settings.from_env(
        {
            "BINAURAL_SAMPLE_RATE": "44100",
            "BINAURAL_VOLUME": "0.5",
            "BINAURAL_AMPLITUDE_SCALE": "legacy",
            "BINAURAL_LOG_LEVEL": "debug",
            "BINAURAL_LOG_DIR": str(tmp_path),
        }
    )
    assert s.sample_rate == 44100
    assert s.volume == 0.5
    assert s.amplitude_scale == 127.0
    assert s.log_level == "DEBUG"
    assert s.log_dir == tmp_path


@pytest.mark.parametrize(
    "env",
    [
        {"BINAURAL_SAMPLE_RATE": "fast"},
        {"BINAURAL_SAMPLE_RATE": "0"},
        {"BINAURAL_SAMPLE_RATE": "441.5"},
        {"BINAURAL_SAMPLE_RATE": "inf"},
        {"BINAURAL_VOLUME": "2"},
        {"BINAURAL_AMPLITUDE_SCALE": "huge"},
    ],
)
def test_invalid_env(env):
    with pytest.raises(InvalidArgumentError):
        Settings.from_env(env)


@pytest.mark.parametrize("text,want", [("legacy", 127.0), ("FULL", 32767.0), ("1000", 1000.0)])
def test_parse_amplitude_scale(text, want):
    assert parse_amplitude_scale(text) == want


def test_setup_logging_file_handler(tmp_path):
    logger = setup_logging(level="debug", log_dir=tmp_path / "logs")
    logging.getLogger("binaural.test").debug("hello file")
    for h in logger.handlers:
        h.flush()
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert "| DEBUG | binaural.test | hello file" in (tmp_path / "logs" / "binaural.log").read_text()


def test_setup_logging_resets_handlers():
    setup_logging()
    logger = setup_logging(level="bogus")
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
