"""Helpers for a Git hooks manager: version checks, output settings, logging, commands and self-update."""

__version__ = "1.11.10"