"""
environment.py — Read-only view of the device the screen describes.

Every lookup the Device Info screen makes goes through an
EnvironmentSnapshot:
  • StaticEnvironment — dict-backed (demo mode, tests)
  • LocalEnvironment  — like Static, but pseudo-files come from this host
  • AdbEnvironment    — a real device over ADB, memoised per instance so
                        one screen load sees one consistent snapshot
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, TextIO

from config import FEATURE_FLAG_DEFAULTS
from modules import adb_utils

logger = logging.getLogger(__name__)


class Fault(Enum):
    """Why a value fell back to its default. Never raised, only reported."""
    SOURCE_UNREADABLE = "source_unreadable"
    MALFORMED_LINE = "malformed_line"
    PROPERTY_ABSENT = "property_absent"
    NO_MATCHING_HANDLER = "no_matching_handler"
    ENTRY_NOT_FOUND = "entry_not_found"


@dataclass(frozen=True)
class ActivityMatch:
    """One activity registered for an intent action."""
    package: str
    name: str
    label: Optional[str] = None
    system: bool = False


class EnvironmentSnapshot(Protocol):

    def property_value(self, name: str, default: str = "") -> str:
        ...

    def secure_setting(self, name: str) -> Optional[str]:
        ...

    def query_activities(self, action: str) -> List[ActivityMatch]:
        ...

    def feature_flag(self, name: str, default: bool = False) -> bool:
        ...

    def open_text(self, path: str) -> TextIO:
        """Open *path* for reading; raises OSError when it cannot be read."""
        ...


# ── Dict-backed ──────────────────────────────────────────────────────

class StaticEnvironment:
    """Environment whose every answer is fixed at construction time."""

    def __init__(
        self,
        properties: Optional[Dict[str, str]] = None,
        secure_settings: Optional[Dict[str, str]] = None,
        activities: Optional[Dict[str, Iterable[ActivityMatch]]] = None,
        flags: Optional[Dict[str, bool]] = None,
        files: Optional[Dict[str, str]] = None,
    ):
        self._properties = dict(properties or {})
        self._secure = dict(secure_settings or {})
        self._activities = {k: list(v) for k, v in (activities or {}).items()}
        self._flags = {**FEATURE_FLAG_DEFAULTS, **(flags or {})}
        self._files = dict(files or {})

    def property_value(self, name: str, default: str = "") -> str:
        # Unset and empty properties are the same thing to getprop
        return self._properties.get(name) or default

    def secure_setting(self, name: str) -> Optional[str]:
        return self._secure.get(name)

    def query_activities(self, action: str) -> List[ActivityMatch]:
        return list(self._activities.get(action, []))

    def feature_flag(self, name: str, default: bool = False) -> bool:
        return self._flags.get(name, default)

    def open_text(self, path: str) -> TextIO:
        if path not in self._files:
            raise FileNotFoundError(path)
        return io.StringIO(self._files[path])


class LocalEnvironment(StaticEnvironment):
    """Static lookups, but pseudo-files are read from this machine.

    Not offered by app.py; it is the entry point for reading a Linux
    host's own /proc from scripts and the test suite.
    """

    def open_text(self, path: str) -> TextIO:
        return open(path, encoding="utf-8", errors="replace")


# ── ADB-backed ───────────────────────────────────────────────────────

class AdbEnvironment:
    """Environment answered by the attached device.

    ADB failures never escape: properties fall back to their default,
    activity queries come back empty, and file reads surface as OSError.
    """

    def __init__(self, flags: Optional[Dict[str, bool]] = None):
        self._flags = {**FEATURE_FLAG_DEFAULTS, **(flags or {})}
        self._props: Dict[str, str] = {}
        self._secure: Dict[str, Optional[str]] = {}
        self._activities: Dict[str, List[ActivityMatch]] = {}

    def property_value(self, name: str, default: str = "") -> str:
        if name not in self._props:
            try:
                self._props[name] = adb_utils.get_prop(name)
            except RuntimeError as exc:
                logger.warning("getprop %s failed: %s", name, exc)
                return default
        return self._props[name] or default

    def secure_setting(self, name: str) -> Optional[str]:
        if name not in self._secure:
            try:
                self._secure[name] = adb_utils.get_secure_setting(name)
            except RuntimeError as exc:
                logger.warning("settings get secure %s failed: %s", name, exc)
                return None
        return self._secure[name]

    def query_activities(self, action: str) -> List[ActivityMatch]:
        if action not in self._activities:
            try:
                raw = adb_utils.query_intent_activities(action)
            except RuntimeError as exc:
                logger.warning("query-activities %s failed: %s", action, exc)
                return []
            self._activities[action] = [ActivityMatch(**m) for m in raw]
        return list(self._activities[action])

    def feature_flag(self, name: str, default: bool = False) -> bool:
        return self._flags.get(name, default)

    def open_text(self, path: str) -> TextIO:
        try:
            return io.StringIO(adb_utils.read_device_file(path))
        except RuntimeError as exc:
            raise OSError(f"cannot read {path} from device: {exc}") from exc
