from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_binaural_logger():
    # setup_logging() detaches the package logger from root; undo that per test.
    yield
    logger = logging.getLogger("binaural")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "BINAURAL_SAMPLE_RATE",
        "BINAURAL_VOLUME",
        "BINAURAL_AMPLITUDE_SCALE",
        "BINAURAL_LOG_LEVEL",
        "BINAURAL_LOG_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
