"""Autodev - autonomous decision-and-workflow engine for development projects."""

__version__ = "0.1.0"
