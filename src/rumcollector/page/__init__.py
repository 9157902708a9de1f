"""Read-only browser data sources."""

from .models import (
    Document,
    DOMRect,
    Element,
    Location,
    Navigator,
    PerformanceMark,
    PerformanceMeasure,
    PerformanceTimeline,
    ScriptElement,
    UserAgentData,
    Window,
)

__all__ = [
    "Document",
    "DOMRect",
    "Element",
    "Location",
    "Navigator",
    "PerformanceMark",
    "PerformanceMeasure",
    "PerformanceTimeline",
    "ScriptElement",
    "UserAgentData",
    "Window",
]
