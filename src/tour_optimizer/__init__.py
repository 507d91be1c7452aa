"""Exact brute-force tour optimization over transit itineraries."""

__version__ = "0.1.0"
