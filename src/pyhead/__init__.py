"""Bounded prefix extraction for byte streams, in the manner of `head`."""

__version__ = "0.1.0"
