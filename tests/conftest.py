"""Pytest configuration for the projection test suite."""

import os
import sys

SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

# The MCP handlers are coroutines
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: run the test inside an event loop")
