"""Command line interface."""

from seedsynth.cli.main import cli

__all__ = ["cli"]
