"""Moderation console for classified-ad listings."""

__version__ = "1.0.0"
