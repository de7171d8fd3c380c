"""Pytest configuration and shared fixtures."""

import logging
from pathlib import Path

import pytest

import edi_directory
from edi_directory.logger import LOGGER_NAME
from edi_directory.registry import DirectoryRegistry

DATA_DIR = Path(__file__).parent / "data"

D96A = {"d0065": "ORDERS", "d0052": "D", "d0054": "96A"}


@pytest.fixture
def test_data():
    """Provide path to the directory tree used as search path."""
    return DATA_DIR


@pytest.fixture
def ndb_path(monkeypatch, test_data):
    """Point EDI_NDB_PATH at the test data tree."""
    monkeypatch.setenv("EDI_NDB_PATH", str(test_data))
    return str(test_data)


@pytest.fixture
def registry(test_data):
    """Fresh registry reading from the test data tree."""
    return DirectoryRegistry(search_path=str(test_data))


@pytest.fixture
def d96a(registry):
    """UN/TDID D.96A directory restricted to ORDERS."""
    return registry.create("E", D96A)


@pytest.fixture(autouse=True)
def clean_state(monkeypatch, tmp_path):
    """Isolate tests from the default registry, stray config files and log handlers."""
    monkeypatch.delenv("EDI_NDB_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    edi_directory.flush_cache()
    edi_directory.caching_on()
    yield
    edi_directory.flush_cache()
    edi_directory.caching_on()
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
