"""Telemetry and observability helpers.

This package emits run events for deterministic auditing of conversions.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
