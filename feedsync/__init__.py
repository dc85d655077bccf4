"""Bounded JSON feed of printer and job events, published locally or over HTTP."""

__version__ = "0.1.0"
