"""Data models for metric events emitted by the web-vitals source."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..page.models import BrowserModel, DOMRect, Element


class MetricKind(str, Enum):
    """Supported metric kinds, valued by their web-vitals names."""

    CLS = "CLS"
    LCP = "LCP"
    FID = "FID"
    TTFB = "TTFB"


class LayoutShiftSource(BrowserModel):
    """An element the browser blames for a layout shift."""

    node: Optional[Element] = None
    previous_rect: Optional[DOMRect] = Field(default=None, alias="previousRect")
    current_rect: Optional[DOMRect] = Field(default=None, alias="currentRect")


class LayoutShiftEntry(BrowserModel):
    value: Optional[float] = None
    had_recent_input: bool = Field(default=False, alias="hadRecentInput")
    sources: Optional[List[LayoutShiftSource]] = None


class LargestPaintEntry(BrowserModel):
    size: Optional[float] = None
    duration: Optional[float] = None
    url: Optional[str] = None
    start_time: float = Field(default=0.0, alias="startTime")


class Metric(BrowserModel):
    """A metric as handed to a registered callback."""

    name: str
    value: float
    delta: float
    id: Optional[str] = None
    entries: List[Dict[str, Any]] = Field(default_factory=list)


class LayoutShiftMetric(Metric):
    name: str = MetricKind.CLS.value
    entries: List[LayoutShiftEntry] = Field(default_factory=list)


class LargestPaintMetric(Metric):
    name: str = MetricKind.LCP.value
    entries: List[LargestPaintEntry] = Field(default_factory=list)


class InputDelayMetric(Metric):
    name: str = MetricKind.FID.value


class FirstByteMetric(Metric):
    name: str = MetricKind.TTFB.value


METRIC_MODEL_MAP = {
    MetricKind.CLS: LayoutShiftMetric,
    MetricKind.LCP: LargestPaintMetric,
    MetricKind.FID: InputDelayMetric,
    MetricKind.TTFB: FirstByteMetric,
}


def parse_metric(kind: MetricKind, data: Dict[str, Any]) -> Metric:
    """Validate a raw metric mapping into the model for ``kind``."""
    return METRIC_MODEL_MAP[MetricKind(kind)].model_validate(data)
