"""Report builders, one per metric kind.

Builders are pure: they read the metric, the page and the session context
and return a report. ``ReportHandler`` binds a builder to its context and
delivery channel so it can be registered as a metric callback.
"""

import logging
from typing import Any, Callable, Optional

from ..inventory.scanner import scan_scripts
from ..page.models import Window
from ..session.context import SessionContext
from ..shifts.significance import filter_shifts
from .models import (
    InputDelayReport,
    LayoutShiftReport,
    LoadTimingReport,
    MetricReport,
    PaintReport,
)

logger = logging.getLogger(__name__)

DOCUMENT_START_MARK = "docStart"
DOCUMENT_END_MARK = "docEnd"
DOCUMENT_EXECUTION_MEASURE = "document execution time"

BEFORE_HYDRATION_MEASURE = "Next.js-before-hydration"
HYDRATION_MEASURE = "Next.js-hydration"
RENDER_MEASURE = "Next.js-render"


def build_layout_shift_report(metric: Any, context: SessionContext) -> LayoutShiftReport:
    return LayoutShiftReport(
        name=metric.name,
        value=metric.value,
        delta=metric.delta,
        context=context,
        shifts=filter_shifts(metric.entries),
    )


def build_paint_report(metric: Any, context: SessionContext) -> PaintReport:
    """Largest-paint report; only the first content entry is described."""
    common = dict(name=metric.name, value=metric.value, delta=metric.delta, context=context)
    if not metric.entries:
        return PaintReport(**common)

    lcp = metric.entries[0]
    return PaintReport(
        has_content_entry=True,
        size=lcp.size,
        duration=lcp.duration,
        url=lcp.url,
        **common,
    )


def _measure_duration(window: Window, name: str) -> Optional[float]:
    measure = window.performance.get_measure(name)
    return measure.duration if measure is not None else None


def build_input_delay_report(metric: Any, context: SessionContext, window: Window) -> InputDelayReport:
    """Input-delay report enriched with script inventory and page timings."""
    load_time = window.performance.measure(
        DOCUMENT_EXECUTION_MEASURE, DOCUMENT_START_MARK, DOCUMENT_END_MARK
    )
    if load_time is None:
        logger.debug(f"Marks {DOCUMENT_START_MARK}/{DOCUMENT_END_MARK} missing; no document load time")

    return InputDelayReport(
        name=metric.name,
        value=metric.value,
        delta=metric.delta,
        context=context,
        document_load_time_ms=load_time.duration if load_time is not None else None,
        scripts_on_page=len(window.document.scripts),
        scripts=scan_scripts(window.document),
        before_hydration_ms=_measure_duration(window, BEFORE_HYDRATION_MEASURE),
        hydration_ms=_measure_duration(window, HYDRATION_MEASURE),
        render_ms=_measure_duration(window, RENDER_MEASURE),
    )


def build_load_timing_report(metric: Any, context: SessionContext) -> LoadTimingReport:
    return LoadTimingReport(
        name=metric.name,
        value=metric.value,
        delta=metric.delta,
        context=context,
    )


class ReportHandler:
    """Metric callback that builds a report and hands it to the delivery channel."""

    def __init__(
        self,
        builder: Callable[..., MetricReport],
        context: SessionContext,
        channel: Any,
        window: Optional[Window] = None,
    ):
        self.builder = builder
        self.context = context
        self.channel = channel
        self.window = window

    def __call__(self, metric: Any) -> MetricReport:
        if self.window is not None:
            report = self.builder(metric, self.context, self.window)
        else:
            report = self.builder(metric, self.context)
        self.channel.deliver(report)
        return report
