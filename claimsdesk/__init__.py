"""HTTP service for submitting, looking up and reversing pharmacy claims, stored in SQLite."""

__version__ = "0.1.0"