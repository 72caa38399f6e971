"""Shared fixtures for the multidistances test suite."""

import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo any handlers ``setup_logging`` attached during a CLI test."""
    yield
    logger = logging.getLogger("multidistances")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in ("METRIC", "MODIFIER", "STRATEGY", "Q", "LEVEL", "WORKERS", "PRECALC"):
        monkeypatch.delenv(f"MULTIDISTANCES_{name}", raising=False)


@pytest.fixture
def corpus(tmp_path, monkeypatch) -> Path:
    """A small directory of text files, with the working directory set to it."""
    words = {
        "kitten.txt": "kitten",
        "sitting.txt": "sitting",
        "mitten.txt": "mitten",
        "banana.txt": "banana",
    }
    root = tmp_path / "corpus"
    root.mkdir()
    for name, text in words.items():
        (root / name).write_text(text, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return root
