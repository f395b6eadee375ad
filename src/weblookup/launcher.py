"""Open URIs in the user's preferred viewer."""

from __future__ import annotations

import logging
import shlex
import subprocess
import webbrowser
from typing import Optional

logger = logging.getLogger(__name__)

LAUNCH_OK = 0
LAUNCH_FAILED = 1
URI_PLACEHOLDER = "%s"


class Launcher:
    """Hand a URI to a browser without waiting for it to close."""

    def __init__(self, browser_command: Optional[str] = None) -> None:
        self.browser_command = (browser_command or "").strip()

    def build_command(self, uri: str) -> list[str]:
        """Return the argv for the configured browser command."""
        argv = shlex.split(self.browser_command)
        if any(URI_PLACEHOLDER in part for part in argv):
            return [part.replace(URI_PLACEHOLDER, uri) for part in argv]
        return argv + [uri]

    def open(self, uri: str) -> int:
        """Open ``uri`` and return a status code (0 on success)."""
        if not self.browser_command:
            return self._open_with_webbrowser(uri)

        argv = self.build_command(uri)
        logger.debug("launching browser argv=%s", argv)
        try:
            subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("browser command failed argv=%s error=%s", argv, exc)
            return LAUNCH_FAILED
        return LAUNCH_OK

    def _open_with_webbrowser(self, uri: str) -> int:
        logger.debug("opening uri with default browser uri=%s", uri)
        try:
            opened = webbrowser.open(uri)
        except webbrowser.Error as exc:
            logger.error("default browser failed uri=%s error=%s", uri, exc)
            return LAUNCH_FAILED
        return LAUNCH_OK if opened else LAUNCH_FAILED
