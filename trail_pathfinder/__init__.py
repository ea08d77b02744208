"""Hazard-aware trail routing and risk scoring."""

__version__ = "0.1.0"
