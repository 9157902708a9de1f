"""Session and environment context captured once per page load."""

import logging
import random
import string
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..page.models import Window

logger = logging.getLogger(__name__)

SESSION_ID_ALPHABET = string.digits + string.ascii_lowercase
SESSION_ID_LENGTH = 9


@dataclass(frozen=True)
class SessionContext:
    """Page-load metadata shared by every report of a session."""

    session_id: str
    pathname: str
    screen_width: int
    screen_height: int
    browser_string: str
    platform: Optional[str] = None
    vendor: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the context fields under their wire names."""
        return {
            "pathname": self.pathname,
            "screenWidth": self.screen_width,
            "screenHeight": self.screen_height,
            "browser": self.browser_string,
            "platform": self.platform,
            "vendor": self.vendor,
            "sessionID": self.session_id,
        }


def generate_session_id(rng: Optional[random.Random] = None) -> str:
    """Generate a short base-36 session token such as ``_k3j9x0a2b``.

    Not cryptographically secure; it only groups the events of one session.
    """
    rng = rng or random.Random()
    return "_" + "".join(rng.choice(SESSION_ID_ALPHABET) for _ in range(SESSION_ID_LENGTH))


def capture_context(window: Window, session_id: Optional[str] = None) -> SessionContext:
    """Read location, viewport and user-agent data from ``window``.

    ``platform`` and ``vendor`` fall back to ``None`` when structured
    user-agent data is unavailable or reports an empty value.
    """
    ua_data = window.navigator.user_agent_data
    platform = (ua_data.platform or None) if ua_data is not None else None
    vendor = (ua_data.vendor or None) if ua_data is not None else None

    context = SessionContext(
        session_id=session_id or generate_session_id(),
        pathname=window.document.location.pathname,
        screen_width=window.inner_width,
        screen_height=window.inner_height,
        browser_string=window.navigator.user_agent,
        platform=platform,
        vendor=vendor,
    )
    logger.info(
        f"Captured session context {context.session_id} for {context.pathname} "
        f"({context.screen_width}x{context.screen_height})"
    )
    return context
