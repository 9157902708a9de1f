"""Inventory of the scripts currently on the page."""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict
from urllib.parse import urlparse

from ..page.models import Document

logger = logging.getLogger(__name__)

INLINE_URL = "inline"


@dataclass(frozen=True)
class ScriptDescriptor:
    """Loading attributes of one script element."""

    name: str
    deferred: bool
    is_async: bool
    url: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["async"] = data.pop("is_async")
        return data


def script_name_from_url(url: str) -> str:
    """Final path segment of ``url`` (empty for URLs ending in ``/``)."""
    path = urlparse(url).path
    return path[path.rfind("/") + 1:]


def scan_scripts(document: Document) -> Dict[str, ScriptDescriptor]:
    """Map each script on the page to its descriptor.

    Sourced scripts are keyed by the basename of their URL, inline scripts by
    ``inlineScript<N>`` where N counts inline scripts in document order,
    starting at 0 for every scan. Two sourced scripts with the same basename
    collapse into one entry; the later one wins.
    """
    scripts: Dict[str, ScriptDescriptor] = {}
    inline_counter = 0

    for script in document.scripts:
        if script.src:
            name = script_name_from_url(script.src)
            url = script.src
        else:
            name = f"inlineScript{inline_counter}"
            url = INLINE_URL
            inline_counter += 1

        if name in scripts:
            logger.debug(f"Script {name} at {url} replaces {scripts[name].url}")

        scripts[name] = ScriptDescriptor(
            name=name,
            deferred=script.has_attribute("defer"),
            is_async=script.has_attribute("async"),
            url=url,
        )

    return scripts
