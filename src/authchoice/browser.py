"""Fire-and-forget system browser launcher."""

from __future__ import annotations

import logging
import threading
import webbrowser

logger = logging.getLogger(__name__)


def open_url(url: str) -> None:
    """Open *url* in the system browser without blocking the caller.

    The browser is launched on a daemon thread. Failures are logged and
    otherwise ignored; callers always print the URL as well so the user can
    open it by hand.
    """

    def _open() -> None:
        try:
            if not webbrowser.open(url):
                logger.debug("No browser available to open %s", url)
        except (webbrowser.Error, OSError) as exc:
            logger.debug("Failed to open browser: %s", exc)

    threading.Thread(target=_open, daemon=True).start()
