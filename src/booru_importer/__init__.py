"""Structured post extraction for booru-style imageboards and social sites."""

__version__ = "0.1.0"
