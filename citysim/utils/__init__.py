"""Logging, news feed, and persistence helpers."""
