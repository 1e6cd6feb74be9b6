"""
device_info.py — Assemble the "About phone" screen.

Builds the preference rows from config.DEVICE_INFO_LAYOUT, runs the
visibility rules, then fills in the summaries read from the device.
The result is a plain DeviceInfoScreen the presentation layer renders.
"""

import html
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from config import (
    DEVICE_INFO_DEFAULT,
    DEVICE_INFO_LAYOUT,
    FLAG_ADDITIONAL_UPDATE_SETTING,
    INTENT_ACTIONS,
    KEY_BASEBAND,
    KEY_BUILD_NUMBER,
    KEY_CPU,
    KEY_FIRMWARE,
    KEY_KERNEL,
    KEY_MEMORY,
    KEY_MODEL,
    KEY_SAFETY_LEGAL,
    KEY_TUTORIAL,
    KEY_UPDATE_SETTING,
    PROPERTY_BASEBAND,
    PROPERTY_BUILD_NUMBER,
    PROPERTY_FIRMWARE,
    PROPERTY_MODEL,
    PROPERTY_URL_SAFETYLEGAL,
    TUTORIAL_INTENT_SUFFIX,
)
from modules.environment import EnvironmentSnapshot, Fault
from modules.metrics_reader import (
    MemInfoSnapshot,
    read_cpu_summary,
    read_kernel_summary,
    read_memory_snapshot,
)
from modules.visibility_resolver import (
    PreferenceEntry,
    RelabelOrRemoveToMatchingActivity,
    RemoveIfFeatureDisabled,
    RemoveIfNoResolvableActivity,
    RemoveIfPropertyEmpty,
    Resolution,
    VisibilityRule,
    resolve_with_faults,
)

logger = logging.getLogger(__name__)

LayoutRow = Tuple[str, str, Optional[str]]


def default_rules() -> Dict[str, VisibilityRule]:
    """Visibility rule for every conditionally shown row."""
    rules: Dict[str, VisibilityRule] = {
        KEY_TUTORIAL: RemoveIfNoResolvableActivity(TUTORIAL_INTENT_SUFFIX),
        KEY_SAFETY_LEGAL: RemoveIfPropertyEmpty(PROPERTY_URL_SAFETYLEGAL),
        KEY_UPDATE_SETTING: RemoveIfFeatureDisabled(FLAG_ADDITIONAL_UPDATE_SETTING),
    }
    for key, action in INTENT_ACTIONS.items():
        rules[key] = RelabelOrRemoveToMatchingActivity(action)
    return rules


# ── Screen model ─────────────────────────────────────────────────────

@dataclass
class DeviceInfoScreen:
    """Resolved rows in layout order plus why any of them fell back."""
    entries: List[PreferenceEntry]
    resolutions: List[Resolution] = field(default_factory=list)
    faults: Dict[str, Fault] = field(default_factory=dict)
    memory: MemInfoSnapshot = field(default_factory=MemInfoSnapshot)

    def find_entry(self, key: str) -> Optional[PreferenceEntry]:
        return find_entry(self.entries, key)

    def visible_entries(self) -> List[PreferenceEntry]:
        return [e for e in self.entries if e.visible]

    def as_mapping(self) -> Dict[str, Dict]:
        return {
            e.key: {"visible": e.visible, "summary": e.summary, "title": e.title}
            for e in self.entries
        }


def row_html(entry: PreferenceEntry) -> str:
    """Markup for one settings row; device-supplied text is escaped."""
    css = "pref-row child" if entry.parent else "pref-row"
    summary = (
        f'<div class="pref-summary">{html.escape(entry.summary)}</div>'
        if entry.summary else ""
    )
    title = html.escape(entry.title or entry.key)
    return f'<div class="{css}"><div class="pref-title">{title}</div>{summary}</div>'


def find_entry(entries: Sequence[PreferenceEntry], key: str) -> Optional[PreferenceEntry]:
    for entry in entries:
        if entry.key == key:
            return entry
    return None


def set_summary(
    entries: List[PreferenceEntry],
    key: str,
    value: Optional[str],
) -> Optional[Fault]:
    """Set *key*'s summary in place; empty values become the placeholder.

    Returns Fault.ENTRY_NOT_FOUND (and changes nothing) if *key* is not on
    the screen.
    """
    entry = find_entry(entries, key)
    if entry is None:
        logger.debug("No '%s' preference to summarise", key)
        return Fault.ENTRY_NOT_FOUND
    entries[entries.index(entry)] = replace(entry, summary=value or DEVICE_INFO_DEFAULT)
    return None


# ── Assembly ─────────────────────────────────────────────────────────

def build_entries(
    layout: Sequence[LayoutRow] = DEVICE_INFO_LAYOUT,
    rules: Optional[Dict[str, VisibilityRule]] = None,
) -> List[PreferenceEntry]:
    """Layout rows with their rules attached.

    Rules for keys the layout lacks are appended as extra entries so they
    are still evaluated (and reported as ENTRY_NOT_FOUND when removed).
    """
    rules = default_rules() if rules is None else rules
    entries = [
        PreferenceEntry(key=key, title=title, parent=parent, rule=rules.get(key))
        for key, title, parent in layout
    ]
    layout_keys = {key for key, _, _ in layout}
    entries.extend(
        PreferenceEntry(key=key, rule=rule)
        for key, rule in rules.items()
        if key not in layout_keys
    )
    return entries


def load_device_info(
    env: EnvironmentSnapshot,
    layout: Sequence[LayoutRow] = DEVICE_INFO_LAYOUT,
    rules: Optional[Dict[str, VisibilityRule]] = None,
) -> DeviceInfoScreen:
    """Resolve visibility, then read metrics and properties into summaries."""
    known_keys = {key for key, _, _ in layout}
    resolutions = resolve_with_faults(build_entries(layout, rules), env, known_keys)

    faults: Dict[str, Fault] = {
        r.entry.key: r.fault for r in resolutions if r.fault is not None
    }
    entries = [r.entry for r in resolutions if r.entry.key in known_keys]

    memory = read_memory_snapshot(env)
    if memory.fault is not None:
        faults[KEY_MEMORY] = memory.fault

    summaries = [
        (KEY_MODEL,        env.property_value(PROPERTY_MODEL, DEVICE_INFO_DEFAULT)),
        (KEY_FIRMWARE,     env.property_value(PROPERTY_FIRMWARE, DEVICE_INFO_DEFAULT)),
        (KEY_BASEBAND,     env.property_value(PROPERTY_BASEBAND, DEVICE_INFO_DEFAULT)),
        (KEY_KERNEL,       read_kernel_summary(env)),
        (KEY_BUILD_NUMBER, env.property_value(PROPERTY_BUILD_NUMBER, DEVICE_INFO_DEFAULT)),
        (KEY_CPU,          read_cpu_summary(env)),
        (KEY_MEMORY,       memory.snapshot.summary()),
    ]
    for key, value in summaries:
        fault = set_summary(entries, key, value)
        if fault is not None:
            faults.setdefault(key, fault)

    logger.info("Device info loaded: %d of %d rows visible",
                sum(1 for e in entries if e.visible), len(entries))
    return DeviceInfoScreen(
        entries=entries,
        resolutions=resolutions,
        faults=faults,
        memory=memory.snapshot,
    )
