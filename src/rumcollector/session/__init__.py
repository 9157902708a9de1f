"""Session and environment context."""

from .context import SessionContext, capture_context, generate_session_id

__all__ = ["SessionContext", "capture_context", "generate_session_id"]
