"""Hook constants and payload contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

QUERY_RESOLVED = "QUERY_RESOLVED"
PRE_LAUNCH = "PRE_LAUNCH"
POST_LAUNCH = "POST_LAUNCH"

SUPPORTED_HOOK_NAMES = {
    QUERY_RESOLVED,
    PRE_LAUNCH,
    POST_LAUNCH,
}


@dataclass
class PreLaunchContext:
    """Mutable payload before a URI is handed to the launcher."""

    backend: str
    request: Any
    uri: str


@dataclass
class PostLaunchContext:
    """Payload after the launcher returned."""

    backend: str
    uri: str
    status: int
