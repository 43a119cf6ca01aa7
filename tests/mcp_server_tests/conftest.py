"""Shared fixtures for the MCP server tests."""

import os
import shutil
import tempfile

import pytest

FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))


@pytest.fixture(scope="module")
def test_base_path():
    """Temp base path holding input-parameters/testprogram/spec.json."""
    temp_dir = tempfile.mkdtemp()
    shutil.copytree(os.path.join(FIXTURES_PATH, 'testprogram'),
                    os.path.join(temp_dir, 'input-parameters', 'testprogram'))
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)
