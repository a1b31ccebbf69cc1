"""Aggregation of driving-stack status messages into API-level reports, and operator and velocity API handlers."""

__version__ = "0.1.0"