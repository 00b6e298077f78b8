"""Checker for small Rust exercises: compile, test and track progress."""

__version__ = "5.5.1"