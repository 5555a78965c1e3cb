"""Docket Router — deterministic real-time routing puzzle engine."""

__version__ = "0.1.0"
