"""
Fixtures shared by the CLI tests.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the CLI callback from reconfiguring the root logger."""
    with patch("channelsieve.cli.main.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def runner() -> CliRunner:
    """CLI test runner."""
    return CliRunner()
