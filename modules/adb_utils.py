"""
adb_utils.py — Low-level Android Debug Bridge helpers.

Provides wrappers around `subprocess.run` for executing ADB commands,
checking device connectivity, reading system properties and secure
settings, cat-ing pseudo-files, and querying which activities resolve an
intent action.
"""

import logging
import os
import platform
import re
import shutil
import subprocess
from typing import Dict, List, Optional

from config import ADB_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

# On Windows, suppress the CMD flash window that appears with each subprocess call.
_CREATION_FLAGS = (
    subprocess.CREATE_NO_WINDOW
    if platform.system() == "Windows"
    else 0
)

# ApplicationInfo.FLAG_SYSTEM
_FLAG_SYSTEM = 0x1


def _find_adb() -> str:
    """Locate the adb executable.

    Checks (in order):
      1. Already on PATH (shutil.which)
      2. Common Windows install locations
    Returns the full path to adb, or just "adb" as fallback.
    """
    found = shutil.which("adb")
    if found:
        return found

    if platform.system() == "Windows":
        candidates = [
            os.path.join(os.environ.get("LOCALAPPDATA", ""), "Android", "platform-tools", "adb.exe"),
            os.path.join(os.environ.get("LOCALAPPDATA", ""), "Android", "Sdk", "platform-tools", "adb.exe"),
            os.path.join(os.environ.get("USERPROFILE", ""), "AppData", "Local", "Android", "Sdk", "platform-tools", "adb.exe"),
        ]
        for path in candidates:
            if path and os.path.isfile(path):
                return path

    return "adb"  # fallback — will raise FileNotFoundError if truly missing


# Resolve once at import time
_ADB = _find_adb()


# ── Core runners ─────────────────────────────────────────────────────

def run_adb_host(args: List[str]) -> str:
    """Run an ADB command that does NOT go through the device shell.

    Examples:
        run_adb_host(["devices"])
        run_adb_host(["start-server"])
    """
    try:
        result = subprocess.run(
            [_ADB] + args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=ADB_TIMEOUT_SECONDS,
            creationflags=_CREATION_FLAGS,
        )
        if result.returncode != 0 and result.stderr.strip():
            raise RuntimeError(f"ADB error: {result.stderr.strip()}")
        return result.stdout
    except FileNotFoundError:
        raise RuntimeError(
            "ADB not found. Install Android Platform Tools and add to PATH."
        )
    except subprocess.TimeoutExpired:
        raise RuntimeError("ADB host command timed out.")


def run_adb(command: str) -> str:
    """Run an ADB *shell* command and return its stdout.

    The *command* string is split on whitespace and passed as:
        adb shell <token1> <token2> …

    Raises RuntimeError on failure, timeout, or if ADB is not installed.
    """
    try:
        result = subprocess.run(
            [_ADB, "shell"] + command.split(),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=ADB_TIMEOUT_SECONDS,
            creationflags=_CREATION_FLAGS,
        )
        if result.returncode != 0 and result.stderr.strip():
            raise RuntimeError(f"ADB shell error: {result.stderr.strip()}")
        return result.stdout
    except FileNotFoundError:
        raise RuntimeError(
            "ADB not found. Install Android Platform Tools and add to PATH."
        )
    except subprocess.TimeoutExpired:
        raise RuntimeError("ADB shell command timed out.")


# ── Device connectivity ──────────────────────────────────────────────

def is_device_connected() -> bool:
    """Return True if at least one device is attached and authorised."""
    try:
        output = run_adb_host(["devices"])
    except RuntimeError:
        return False
    # Each connected device line looks like:  <serial>\tdevice
    lines = output.strip().splitlines()[1:]  # skip header
    return any("\tdevice" in line for line in lines)


# ── Properties & settings ────────────────────────────────────────────

def get_prop(name: str) -> str:
    """Return `getprop <name>` stripped; "" when the property is unset."""
    return run_adb(f"getprop {name}").strip()


def get_secure_setting(name: str) -> Optional[str]:
    """Return `settings get secure <name>`, or None when unset."""
    value = run_adb(f"settings get secure {name}").strip()
    if not value or value == "null":
        return None
    return value


def read_device_file(path: str) -> str:
    """Return the contents of a file on the device (`cat <path>`)."""
    return run_adb(f"cat {path}")


# ── Activity resolution ──────────────────────────────────────────────

# Each match in `cmd package query-activities -a <action>` starts with
#   Activity #0:
# followed by an indented ResolveInfo dump.
_RE_ACTIVITY_BLOCK = re.compile(r"^\s*Activity #\d+:\s*$", re.MULTILINE)
_RE_NAME = re.compile(r"^\s+name=(\S+)", re.MULTILINE)
_RE_PACKAGE = re.compile(r"^\s+packageName=(\S+)", re.MULTILINE)
_RE_LABEL = re.compile(r"nonLocalizedLabel=(.+?)\s+icon=")
_RE_FLAGS = re.compile(r"^\s+flags=0x([0-9a-fA-F]+)", re.MULTILINE)


def parse_query_activities(raw: str) -> List[Dict]:
    """Parse a `cmd package query-activities` dump into plain dicts.

    Returns [{"package", "name", "label", "system"}, …] in resolution order.
    *label* is None when the activity only carries a resource label.
    """
    starts = [m.end() for m in _RE_ACTIVITY_BLOCK.finditer(raw)]
    ends = [m.start() for m in _RE_ACTIVITY_BLOCK.finditer(raw)][1:] + [len(raw)]

    matches: List[Dict] = []
    for start, end in zip(starts, ends):
        block = raw[start:end]
        name_m = _RE_NAME.search(block)
        package_m = _RE_PACKAGE.search(block)
        if not (name_m and package_m):
            continue
        activity_info, _, app_info = block.partition("ApplicationInfo:")
        label_m = _RE_LABEL.search(activity_info)
        label = label_m.group(1).strip() if label_m else None
        if label == "null":
            label = None
        # ActivityInfo carries its own flags=; FLAG_SYSTEM lives on the app
        flags_m = _RE_FLAGS.search(app_info)
        flags = int(flags_m.group(1), 16) if flags_m else 0
        matches.append({
            "package": package_m.group(1),
            "name": name_m.group(1),
            "label": label,
            "system": bool(flags & _FLAG_SYSTEM),
        })
    return matches


def query_intent_activities(action: str) -> List[Dict]:
    """Return the activities that resolve *action* on the device."""
    raw = run_adb(f"cmd package query-activities -a {action}")
    matches = parse_query_activities(raw)
    logger.debug("%d activities resolve %s", len(matches), action)
    return matches
