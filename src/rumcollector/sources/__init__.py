"""Metric sources and their event models."""

from .emitter import Emission, MetricEmitter, parse_emissions
from .models import (
    FirstByteMetric,
    InputDelayMetric,
    LargestPaintEntry,
    LargestPaintMetric,
    LayoutShiftEntry,
    LayoutShiftMetric,
    LayoutShiftSource,
    Metric,
    MetricKind,
    parse_metric,
)

__all__ = [
    "Emission",
    "MetricEmitter",
    "parse_emissions",
    "FirstByteMetric",
    "InputDelayMetric",
    "LargestPaintEntry",
    "LargestPaintMetric",
    "LayoutShiftEntry",
    "LayoutShiftMetric",
    "LayoutShiftSource",
    "Metric",
    "MetricKind",
    "parse_metric",
]
