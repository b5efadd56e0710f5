#!/usr/bin/env python3
"""
Configuration errors and their reporting.

None of these conditions is fatal. The component that hits one skips its
positional update for that tick, keeps its last values and reports the
condition; the frame loop carries on.
"""
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Base class for recoverable, per-component configuration problems."""


class UnknownBodyId(ConfigurationError):
    def __init__(self, body_id: str):
        super().__init__(f"Body '{body_id}' not found in motion table.")
        self.body_id = body_id


class MissingAnchor(ConfigurationError):
    def __init__(self, body_id: str):
        super().__init__(f"No anchor position for orbiting body '{body_id}'.")
        self.body_id = body_id


class EmptyTargetSet(ConfigurationError):
    def __init__(self):
        super().__init__("Camera tracker has no targets.")


class AllTargetsUnavailable(ConfigurationError):
    def __init__(self, count: int):
        super().__init__(f"All {count} camera targets are unavailable; holding last pose.")
        self.count = count


class ErrorReporter:
    """
    Logs configuration errors as warnings, once per condition.

    A failing component would otherwise log the same warning every frame, so a
    condition is logged when it first appears for a source and again only
    after it has cleared.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self._active: Dict[str, str] = {}

    def report(self, source: str, error: ConfigurationError) -> ConfigurationError:
        msg = str(error)
        if self._active.get(source) != msg:
            self._active[source] = msg
            self.log.warning("%s: %s", source, msg)
        return error

    def clear(self, source: str) -> None:
        if self._active.pop(source, None) is not None:
            self.log.info("%s: recovered", source)

    def is_active(self, source: str) -> bool:
        return source in self._active


# Module-level default used when a component is not given its own reporter
default_reporter = ErrorReporter()
