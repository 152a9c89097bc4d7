"""Reveal: anonymous posting with toggle votes and community flagging."""

__version__ = "0.1.0"
