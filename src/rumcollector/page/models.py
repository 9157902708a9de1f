"""Data models for the browser surfaces the collector reads from.

These mirror the small subset of the DOM and Performance APIs that the
collector touches. They are loaded from recorded page sessions (YAML/JSON),
so field aliases follow the browser's camelCase names.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _latest_entry(entries, name):
    """Most recently recorded entry called ``name``, or ``None``."""
    for entry in reversed(entries):
        if entry.name == name:
            return entry
    return None


class BrowserModel(BaseModel):
    """Base for browser data models; accepts both alias and field names."""

    model_config = ConfigDict(populate_by_name=True)


class Location(BrowserModel):
    """The subset of ``document.location`` used for session context."""

    pathname: str = "/"
    href: Optional[str] = None


class UserAgentData(BrowserModel):
    """Structured user-agent data. Not every browser exposes it."""

    platform: Optional[str] = None
    vendor: Optional[str] = None
    mobile: bool = False


class Navigator(BrowserModel):
    user_agent: str = Field(default="", alias="userAgent")
    user_agent_data: Optional[UserAgentData] = Field(default=None, alias="userAgentData")


class Element(BrowserModel):
    """A DOM element reduced to its class list and parent chain."""

    tag_name: str = Field(default="div", alias="tagName")
    class_list: List[str] = Field(default_factory=list, alias="classList")
    parent_element: Optional["Element"] = Field(default=None, alias="parentElement")


class DOMRect(BrowserModel):
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None


class ScriptElement(BrowserModel):
    """A ``<script>`` element: its resolved source URL and loading attributes."""

    src: Optional[str] = None
    attributes: List[str] = Field(default_factory=list)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes


class Document(BrowserModel):
    location: Location = Field(default_factory=Location)
    scripts: List[ScriptElement] = Field(default_factory=list)


class PerformanceMark(BrowserModel):
    name: str
    start_time: float = Field(default=0.0, alias="startTime")


class PerformanceMeasure(BrowserModel):
    name: str
    start_time: float = Field(default=0.0, alias="startTime")
    duration: float = 0.0


class PerformanceTimeline(BrowserModel):
    """The page's performance entry buffer (marks and measures, in milliseconds)."""

    marks: List[PerformanceMark] = Field(default_factory=list)
    measures: List[PerformanceMeasure] = Field(default_factory=list)

    def mark(self, name: str, start_time: float) -> PerformanceMark:
        """Record a named mark at ``start_time`` milliseconds."""
        entry = PerformanceMark(name=name, start_time=start_time)
        self.marks.append(entry)
        return entry

    def measure(
        self, name: str, start_mark: str, end_mark: str
    ) -> Optional[PerformanceMeasure]:
        """Record a measure between two marks.

        Unlike the browser API, a missing mark yields ``None`` instead of an
        exception. When a mark name was recorded more than once, the latest
        one is used.
        """
        start = _latest_entry(self.marks, start_mark)
        end = _latest_entry(self.marks, end_mark)
        if start is None or end is None:
            return None

        entry = PerformanceMeasure(
            name=name,
            start_time=start.start_time,
            duration=end.start_time - start.start_time,
        )
        self.measures.append(entry)
        return entry

    def get_measure(self, name: str) -> Optional[PerformanceMeasure]:
        """Return the latest existing measure called ``name``, if any."""
        return _latest_entry(self.measures, name)


class Window(BrowserModel):
    """Top-level page object handed to the collector when it mounts."""

    inner_width: int = Field(default=0, alias="innerWidth")
    inner_height: int = Field(default=0, alias="innerHeight")
    navigator: Navigator = Field(default_factory=Navigator)
    document: Document = Field(default_factory=Document)
    performance: PerformanceTimeline = Field(default_factory=PerformanceTimeline)
