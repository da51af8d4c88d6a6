"""Seedbed - select, create or clone a git repository for a new project."""

__version__ = "0.1.0"
