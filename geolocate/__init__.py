"""Latency-based IP geolocation using a distributed probe network."""

__version__ = "0.1.0"
