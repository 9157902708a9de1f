"""Script inventory scanning."""

from .scanner import ScriptDescriptor, scan_scripts

__all__ = ["ScriptDescriptor", "scan_scripts"]
