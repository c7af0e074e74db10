"""Shared pytest fixtures for SPINTABLE tests."""

import os
from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from spintable.config.settings import Settings, reset_settings
from spintable.spinner.output import uninstall_router
from spintable.spinner.pause import PauseCoordinator


@pytest.fixture(autouse=True)
def clean_settings():
    """Every test starts from the environment-free default settings."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("SPINTABLE_")}
    with patch.dict(os.environ, env, clear=True):
        reset_settings()
        yield
    reset_settings()


@pytest.fixture(autouse=True)
def restore_streams():
    """Remove the output routers installed by tasks started in a test."""
    yield
    uninstall_router()


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with a short tick so render loops finish quickly."""
    return Settings(period=0.01, glyph_style="unicode")


@pytest.fixture
def terminal() -> StringIO:
    """Buffer standing in for the terminal."""
    return StringIO()


@pytest.fixture
def test_console(terminal: StringIO) -> Console:
    """Console writing ANSI output into the ``terminal`` buffer."""
    return Console(file=terminal, force_terminal=True, width=120)


@pytest.fixture
def pause_coordinator() -> PauseCoordinator:
    """A coordinator private to the test."""
    return PauseCoordinator()
