"""Collector orchestration."""

from .collector import RumCollector

__all__ = ["RumCollector"]
