"""Command line interface for jobflow."""

from jobflow.cli.main import app, main

__all__ = ["app", "main"]
