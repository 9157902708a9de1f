"""Layout-shift significance filtering."""

from .significance import CLS_THRESHOLD, ShiftRecord, filter_shifts

__all__ = ["CLS_THRESHOLD", "ShiftRecord", "filter_shifts"]
