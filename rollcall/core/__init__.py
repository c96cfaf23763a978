"""Core roll configuration and group resolution engine."""
