"""taskboard: a small task (to-do) backend with pluggable storage."""

__version__ = "0.1.0"
