"""Multithreaded TCP connect scanner with optional banner grabbing."""

__version__ = "0.1.0"
