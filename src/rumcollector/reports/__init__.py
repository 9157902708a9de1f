"""Metric report models and builders."""

from .builders import (
    ReportHandler,
    build_input_delay_report,
    build_layout_shift_report,
    build_load_timing_report,
    build_paint_report,
)
from .models import (
    InputDelayReport,
    LayoutShiftReport,
    LoadTimingReport,
    MetricReport,
    PaintReport,
    report_from_dict,
)

__all__ = [
    "ReportHandler",
    "build_input_delay_report",
    "build_layout_shift_report",
    "build_load_timing_report",
    "build_paint_report",
    "InputDelayReport",
    "LayoutShiftReport",
    "LoadTimingReport",
    "MetricReport",
    "PaintReport",
    "report_from_dict",
]
