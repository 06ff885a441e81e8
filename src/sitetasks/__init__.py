"""Construction task scheduling: window queries, status updates and persistence."""

__version__ = "0.1.0"
