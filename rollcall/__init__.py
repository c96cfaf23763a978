"""Rollcall: roll request configuration and group check resolution."""

__version__ = "0.3.0"
