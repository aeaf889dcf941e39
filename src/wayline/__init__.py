"""Wayline: unified transit places and real-time departures."""

__version__ = "0.1.0"
