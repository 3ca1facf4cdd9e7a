"""Anonymous usage telemetry.

Events are sent as a single GET request whose query string carries the
event fields, the tool version (``v``) and a CI marker (``ci=1``). The
request runs on a daemon thread with a short timeout; ``track`` returns
immediately and nothing it does can raise into the caller or hold up the
process at exit.

Telemetry is disabled when ``DISABLE_TELEMETRY`` or ``DO_NOT_TRACK`` is set
to any non-empty value.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping

import httpx

logger = logging.getLogger(__name__)

TELEMETRY_URL = "https://add-skill.vercel.sh/t"

# Timeout for the fire-and-forget request (seconds).
DEFAULT_TIMEOUT: float = 3.0

_CI_ENV_VARS = (
    "CI",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "CIRCLECI",
    "TRAVIS",
    "BUILDKITE",
    "JENKINS_URL",
    "TEAMCITY_VERSION",
)
_OPT_OUT_ENV_VARS = ("DISABLE_TELEMETRY", "DO_NOT_TRACK")


class TelemetryClient:
    """Fire-and-forget event sender.

    Attributes:
        version: Tool version attached to every event.
        url: Collection endpoint.
        env: Environment consulted for opt-out and CI detection.
    """

    def __init__(
        self,
        version: str | None = None,
        *,
        url: str = TELEMETRY_URL,
        env: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.version = version
        self.url = url
        self.env = env if env is not None else os.environ
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return not any(self.env.get(name) for name in _OPT_OUT_ENV_VARS)

    @property
    def is_ci(self) -> bool:
        return any(self.env.get(name) for name in _CI_ENV_VARS)

    def build_params(self, event: str, fields: Mapping[str, object]) -> dict[str, str]:
        """Build the query parameters for an event; ``None`` fields are dropped."""
        params: dict[str, str] = {}
        if self.version:
            params["v"] = self.version
        if self.is_ci:
            params["ci"] = "1"
        params["event"] = event
        for key, value in fields.items():
            if value is not None:
                params[key] = str(value)
        return params

    def _send(self, params: dict[str, str]) -> None:
        try:
            httpx.get(self.url, params=params, timeout=self.timeout)
        except httpx.HTTPError as exc:
            logger.debug("Telemetry request failed: %s", exc)

    def track(self, event: str, **fields: object) -> threading.Thread | None:
        """Send an event in the background.

        Returns:
            The sender thread (useful for tests), or None when telemetry is
            disabled.
        """
        if not self.enabled:
            return None
        params = self.build_params(event, fields)
        thread = threading.Thread(target=self._send, args=(params,), daemon=True)
        thread.start()
        return thread


class NullTelemetry(TelemetryClient):
    """Telemetry client that never sends anything."""

    def track(self, event: str, **fields: object) -> threading.Thread | None:
        return None
