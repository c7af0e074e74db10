"""Command-line interface for SPINTABLE."""

from spintable.cli.app import app

__all__ = ["app"]
