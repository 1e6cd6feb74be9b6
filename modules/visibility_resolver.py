"""
visibility_resolver.py — Decide which Device Info rows stay, get a new
title, or disappear.

Each PreferenceEntry carries at most one VisibilityRule. Rules read only
the shared EnvironmentSnapshot and their own entry, so entries can be
resolved in any order and resolving twice gives the same answer.

This module is pure logic — it never calls ADB directly.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Set, Union

from config import SECURE_DEFAULT_INPUT_METHOD
from modules.environment import EnvironmentSnapshot, Fault

logger = logging.getLogger(__name__)


# ── Rules ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RemoveIfPropertyEmpty:
    property: str


@dataclass(frozen=True)
class RemoveIfNoResolvableActivity:
    """Intent action is '<package of the default input method>' + suffix."""
    intent_suffix: str


@dataclass(frozen=True)
class RelabelOrRemoveToMatchingActivity:
    intent_action: str


@dataclass(frozen=True)
class RemoveIfFeatureDisabled:
    flag: str


VisibilityRule = Union[
    RemoveIfPropertyEmpty,
    RemoveIfNoResolvableActivity,
    RelabelOrRemoveToMatchingActivity,
    RemoveIfFeatureDisabled,
]


# ── Data model ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class PreferenceEntry:
    """One row of the settings list as the presentation layer sees it."""
    key: str
    title: Optional[str] = None
    summary: Optional[str] = None
    visible: bool = True
    parent: Optional[str] = None          # group key, None = root screen
    rule: Optional[VisibilityRule] = None


KEEP = "keep"
RELABEL = "relabel"
REMOVE = "remove"


@dataclass(frozen=True)
class Resolution:
    entry: PreferenceEntry
    outcome: str                          # KEEP | RELABEL | REMOVE
    fault: Optional[Fault] = None


# ── Helpers ──────────────────────────────────────────────────────────

def _package_of_component(component: Optional[str]) -> Optional[str]:
    """'com.foo/.Bar' → 'com.foo'; None for anything not a flattened component."""
    if not component:
        return None
    package, sep, cls = component.partition("/")
    if not sep or not package or not cls:
        return None
    return package


def _removed(entry: PreferenceEntry, fault: Optional[Fault]) -> Resolution:
    return Resolution(replace(entry, visible=False), REMOVE, fault)


# ── Per-rule evaluation ──────────────────────────────────────────────

def _property_empty(entry, rule: RemoveIfPropertyEmpty, env) -> Resolution:
    if env.property_value(rule.property) == "":
        return _removed(entry, Fault.PROPERTY_ABSENT)
    return Resolution(entry, KEEP)


def _no_resolvable_activity(entry, rule: RemoveIfNoResolvableActivity, env) -> Resolution:
    package = _package_of_component(env.secure_setting(SECURE_DEFAULT_INPUT_METHOD))
    if package is None:
        logger.debug("No default input method; removing '%s'", entry.key)
        return _removed(entry, Fault.PROPERTY_ABSENT)

    if not env.query_activities(package + rule.intent_suffix):
        return _removed(entry, Fault.NO_MATCHING_HANDLER)
    return Resolution(entry, KEEP)


def _matching_activity(entry, rule: RelabelOrRemoveToMatchingActivity, env) -> Resolution:
    # Only a handler shipped on the system image may claim the row.
    for match in env.query_activities(rule.intent_action):
        if match.system:
            title = match.label or entry.title
            return Resolution(replace(entry, title=title, visible=True), RELABEL)
    return _removed(entry, Fault.NO_MATCHING_HANDLER)


def _feature_disabled(entry, rule: RemoveIfFeatureDisabled, env) -> Resolution:
    if not env.feature_flag(rule.flag):
        return _removed(entry, None)
    return Resolution(entry, KEEP)


_EVALUATORS = {
    RemoveIfPropertyEmpty: _property_empty,
    RemoveIfNoResolvableActivity: _no_resolvable_activity,
    RelabelOrRemoveToMatchingActivity: _matching_activity,
    RemoveIfFeatureDisabled: _feature_disabled,
}


# ── Public API ───────────────────────────────────────────────────────

def resolve_entry(
    entry: PreferenceEntry,
    env: EnvironmentSnapshot,
    known_keys: Optional[Set[str]] = None,
) -> Resolution:
    """Apply *entry*'s rule. Entries without a rule are kept unchanged."""
    if entry.rule is None:
        return Resolution(entry, KEEP)

    resolution = _EVALUATORS[type(entry.rule)](entry, entry.rule, env)

    if resolution.outcome == REMOVE and known_keys is not None and entry.key not in known_keys:
        logger.debug("Rule %s removes '%s' but the screen has no such preference",
                     entry.rule, entry.key)
        return replace(resolution, fault=Fault.ENTRY_NOT_FOUND)
    return resolution


def resolve_with_faults(
    entries: Iterable[PreferenceEntry],
    env: EnvironmentSnapshot,
    known_keys: Optional[Set[str]] = None,
) -> List[Resolution]:
    """Resolve every entry, keeping the outcome and fault for each."""
    return [resolve_entry(e, env, known_keys) for e in entries]


def resolve(
    entries: Iterable[PreferenceEntry],
    env: EnvironmentSnapshot,
    known_keys: Optional[Set[str]] = None,
) -> List[PreferenceEntry]:
    """Return the entries with visibility and titles decided.

    *known_keys* is the set of keys the screen actually shows; removing an
    entry outside it is logged instead of failing.
    """
    return [r.entry for r in resolve_with_faults(entries, env, known_keys)]
