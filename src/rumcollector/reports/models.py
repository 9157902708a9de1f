"""Data models for metric reports.

Each report serializes to a flat dict: the metric name, value and delta,
then metric-specific enrichment, then the session context. Context fields
are overlaid last, so they win on a key collision.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Mapping, Optional

from ..inventory.scanner import ScriptDescriptor
from ..session.context import SessionContext
from ..shifts.significance import ShiftRecord

logger = logging.getLogger(__name__)

SHIFT_KEY_PREFIX = "shift_"


@dataclass(frozen=True)
class MetricReport:
    """Base report: metric name, value and delta plus session context."""

    KIND_PREFIX: ClassVar[str] = ""

    name: str
    value: float
    delta: float
    context: SessionContext

    def metric_fields(self) -> Dict[str, Any]:
        """Metric-specific fields, in wire order."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Return a fresh JSON-compatible dict of the report."""
        report = {
            "name": self.name,
            f"{self.KIND_PREFIX}_value": self.value,
            f"{self.KIND_PREFIX}_delta": self.delta,
        }
        report.update(self.metric_fields())

        context_fields = self.context.to_dict()
        shadowed = sorted(set(report) & set(context_fields))
        if shadowed:
            logger.warning(f"Context fields override {self.name} report fields: {shadowed}")
        report.update(context_fields)
        return report

    @classmethod
    def _common_from_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": data["name"],
            "value": data[f"{cls.KIND_PREFIX}_value"],
            "delta": data[f"{cls.KIND_PREFIX}_delta"],
            "context": SessionContext(
                session_id=data["sessionID"],
                pathname=data["pathname"],
                screen_width=data["screenWidth"],
                screen_height=data["screenHeight"],
                browser_string=data["browser"],
                platform=data.get("platform"),
                vendor=data.get("vendor"),
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetricReport":
        return cls(**cls._common_from_dict(data))


@dataclass(frozen=True)
class LayoutShiftReport(MetricReport):
    KIND_PREFIX: ClassVar[str] = "cls"

    shifts: Mapping[str, ShiftRecord] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "shifts", MappingProxyType(dict(self.shifts)))

    def metric_fields(self) -> Dict[str, Any]:
        return {key: record.to_dict() for key, record in self.shifts.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutShiftReport":
        shifts = {
            key: ShiftRecord.from_dict(value)
            for key, value in data.items()
            if key.startswith(SHIFT_KEY_PREFIX)
        }
        return cls(shifts=shifts, **cls._common_from_dict(data))


@dataclass(frozen=True)
class PaintReport(MetricReport):
    KIND_PREFIX: ClassVar[str] = "lcp"

    # False when the metric carried no content entries
    has_content_entry: bool = False
    size: Optional[float] = None
    duration: Optional[float] = None
    url: Optional[str] = None

    def metric_fields(self) -> Dict[str, Any]:
        if not self.has_content_entry:
            return {}
        return {"size": self.size, "duration": self.duration, "url": self.url}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaintReport":
        has_entry = "size" in data
        return cls(
            has_content_entry=has_entry,
            size=data.get("size"),
            duration=data.get("duration"),
            url=data.get("url"),
            **cls._common_from_dict(data),
        )


@dataclass(frozen=True)
class InputDelayReport(MetricReport):
    KIND_PREFIX: ClassVar[str] = "fid"

    document_load_time_ms: Optional[float] = None
    scripts_on_page: int = 0
    scripts: Mapping[str, ScriptDescriptor] = field(default_factory=dict)
    before_hydration_ms: Optional[float] = None
    hydration_ms: Optional[float] = None
    render_ms: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "scripts", MappingProxyType(dict(self.scripts)))

    def metric_fields(self) -> Dict[str, Any]:
        return {
            "documentLoadTimeMS": self.document_load_time_ms,
            "scriptsOnPage": self.scripts_on_page,
            "scripts": {name: script.to_dict() for name, script in self.scripts.items()},
            "beforeHydrationMS": self.before_hydration_ms,
            "hydrationMS": self.hydration_ms,
            "renderMS": self.render_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InputDelayReport":
        scripts = {
            name: ScriptDescriptor(
                name=script["name"],
                deferred=script["deferred"],
                is_async=script["async"],
                url=script["url"],
            )
            for name, script in data.get("scripts", {}).items()
        }
        return cls(
            document_load_time_ms=data.get("documentLoadTimeMS"),
            scripts_on_page=data.get("scriptsOnPage", 0),
            scripts=scripts,
            before_hydration_ms=data.get("beforeHydrationMS"),
            hydration_ms=data.get("hydrationMS"),
            render_ms=data.get("renderMS"),
            **cls._common_from_dict(data),
        )


@dataclass(frozen=True)
class LoadTimingReport(MetricReport):
    KIND_PREFIX: ClassVar[str] = "ttfb"


REPORT_CLASSES = (LayoutShiftReport, PaintReport, InputDelayReport, LoadTimingReport)


def report_from_dict(data: Dict[str, Any]) -> MetricReport:
    """Rebuild a report from its wire dict, choosing the variant by value key."""
    for report_cls in REPORT_CLASSES:
        if f"{report_cls.KIND_PREFIX}_value" in data:
            return report_cls.from_dict(data)
    raise ValueError(f"Unrecognized report: no known <kind>_value key in {sorted(data)}")
