"""Unit tests configuration file."""

import os

import pytest

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def api_path():
    """Path of the API description the tests compile."""
    return os.path.join(FILE_DIR, "api.json")


@pytest.fixture
def api_text(api_path):
    with open(api_path, encoding="utf-8") as f:
        return f.read()
