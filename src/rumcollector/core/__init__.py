"""Page event loop."""

from .page_environment import PageEventLoop

__all__ = ["PageEventLoop"]
