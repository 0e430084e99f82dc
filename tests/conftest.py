# tests/conftest.py

"""Shared pytest fixtures for all crossmatch tests."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def no_network() -> Generator[MagicMock, None, None]:
    """Patch the curl_cffi Session so no test can reach a real API."""
    with patch("curl_cffi.requests.Session") as mock_session_cls:
        yield mock_session_cls
