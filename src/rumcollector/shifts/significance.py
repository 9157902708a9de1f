"""Significance filter for layout-shift entries.

A CLS metric can carry dozens of shift entries. Only entries at or above
``CLS_THRESHOLD`` are kept, and for each kept entry the classes of its source
elements (and their parents) are collected to help locate the shift on the
page.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Shifts below this value are treated as noise
CLS_THRESHOLD = 0.02


@dataclass(frozen=True)
class ShiftRecord:
    """Diagnostic summary of one significant layout shift."""

    value: float
    initial_height: Optional[float] = None
    initial_width: Optional[float] = None
    end_height: Optional[float] = None
    end_width: Optional[float] = None
    source_element_class_lists: Tuple[str, ...] = field(default_factory=tuple)
    source_element_parent_class_list: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "initialHeight": self.initial_height,
            "initialWidth": self.initial_width,
            "endHeight": self.end_height,
            "endWidth": self.end_width,
            "sourceElementClassLists": list(self.source_element_class_lists),
            "sourceElementParentClassList": list(self.source_element_parent_class_list),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShiftRecord":
        return cls(
            value=data["value"],
            initial_height=data.get("initialHeight"),
            initial_width=data.get("initialWidth"),
            end_height=data.get("endHeight"),
            end_width=data.get("endWidth"),
            source_element_class_lists=tuple(data.get("sourceElementClassLists", [])),
            source_element_parent_class_list=tuple(data.get("sourceElementParentClassList", [])),
        )


def shift_key(ordinal: int) -> str:
    return f"shift_{ordinal}"


def _class_list(element: Any) -> List[str]:
    """Class names of ``element``; nothing when the element is missing."""
    if element is None:
        return []
    try:
        return list(element.class_list)
    except (AttributeError, TypeError):
        return []


def _parent_class_list(element: Any) -> List[str]:
    try:
        return _class_list(element.parent_element)
    except AttributeError:
        return []


def _rect_size(rect: Any) -> Tuple[Optional[float], Optional[float]]:
    """Return ``(height, width)`` of ``rect``, or ``(None, None)``."""
    try:
        return rect.height, rect.width
    except AttributeError:
        return None, None


def _build_record(entry: Any) -> ShiftRecord:
    classes: Dict[str, None] = {}
    parents: Dict[str, None] = {}
    initial_height = initial_width = end_height = end_width = None

    sources = getattr(entry, "sources", None) or []
    try:
        for source in sources:
            node = getattr(source, "node", None)
            classes.update(dict.fromkeys(_class_list(node)))
            parents.update(dict.fromkeys(_parent_class_list(node)))
            # Rect sizes come from the last source iterated
            initial_height, initial_width = _rect_size(getattr(source, "previous_rect", None))
            end_height, end_width = _rect_size(getattr(source, "current_rect", None))
    except TypeError as e:
        logger.warning(f"Unreadable sources on layout-shift entry ({entry.value}): {e}")

    return ShiftRecord(
        value=entry.value,
        initial_height=initial_height,
        initial_width=initial_width,
        end_height=end_height,
        end_width=end_width,
        source_element_class_lists=tuple(classes),
        source_element_parent_class_list=tuple(parents),
    )


def filter_shifts(entries: Iterable[Any], threshold: float = CLS_THRESHOLD) -> Dict[str, ShiftRecord]:
    """Keep the entries whose value meets ``threshold``.

    Returns a mapping of ``shift_1``, ``shift_2``, ... to records, numbered
    contiguously in the order the entries are visited. An entry without a
    readable value is skipped without consuming an ordinal; an entry whose
    sources cannot be read is still reported, with no classes and no sizes.
    """
    shifts: Dict[str, ShiftRecord] = {}

    for position, entry in enumerate(entries or []):
        try:
            value = entry.value
            if value is None:
                raise TypeError("entry has no value")
            if value < threshold:
                continue
        except (AttributeError, TypeError) as e:
            logger.warning(f"Skipping unreadable layout-shift entry at position {position}: {e}")
            continue

        shifts[shift_key(len(shifts) + 1)] = _build_record(entry)

    logger.debug(f"Kept {len(shifts)} significant layout shifts")
    return shifts
