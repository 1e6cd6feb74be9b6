import logging

from modules.environment import ActivityMatch, Fault, StaticEnvironment
from modules.visibility_resolver import (
    KEEP,
    RELABEL,
    REMOVE,
    PreferenceEntry,
    RelabelOrRemoveToMatchingActivity,
    RemoveIfFeatureDisabled,
    RemoveIfNoResolvableActivity,
    RemoveIfPropertyEmpty,
    resolve,
    resolve_entry,
    resolve_with_faults,
)

TERMS = "android.settings.TERMS"
LATIN_IME = "com.android.inputmethod.latin/.LatinIME"


def _entry(rule, key="row", title="Row"):
    return PreferenceEntry(key=key, title=title, rule=rule)


# ── RemoveIfPropertyEmpty ────────────────────────────────────────────

def test_property_empty_removes():
    env = StaticEnvironment(properties={"x": ""})
    [out] = resolve([_entry(RemoveIfPropertyEmpty("x"))], env)
    assert out.visible is False


def test_property_unset_removes():
    [out] = resolve([_entry(RemoveIfPropertyEmpty("x"))], StaticEnvironment())
    assert out.visible is False


def test_property_set_keeps_entry_unchanged():
    entry = _entry(RemoveIfPropertyEmpty("x"))
    env = StaticEnvironment(properties={"x": "http://example.com/legal"})
    assert resolve([entry], env) == [entry]


def test_removing_unknown_entry_is_logged_not_raised(caplog):
    entry = _entry(RemoveIfPropertyEmpty("ro.url.safetylegal"), key="safetylegal")
    with caplog.at_level(logging.DEBUG, logger="modules.visibility_resolver"):
        result = resolve_entry(entry, StaticEnvironment(), known_keys={"other"})
    assert result.outcome == REMOVE
    assert result.fault is Fault.ENTRY_NOT_FOUND
    assert "safetylegal" in caplog.text


# ── RemoveIfNoResolvableActivity ─────────────────────────────────────

def test_tutorial_kept_when_ime_ships_one():
    env = StaticEnvironment(
        secure_settings={"default_input_method": LATIN_IME},
        activities={"com.android.inputmethod.latin.tutorial": [
            ActivityMatch("com.android.inputmethod.latin", "com.android.inputmethod.latin.Tutorial"),
        ]},
    )
    result = resolve_entry(_entry(RemoveIfNoResolvableActivity(".tutorial")), env)
    assert result.outcome == KEEP
    assert result.entry.visible is True


def test_tutorial_removed_without_handler():
    env = StaticEnvironment(secure_settings={"default_input_method": LATIN_IME})
    result = resolve_entry(_entry(RemoveIfNoResolvableActivity(".tutorial")), env)
    assert result.outcome == REMOVE
    assert result.fault is Fault.NO_MATCHING_HANDLER


def test_tutorial_removed_without_default_ime():
    for ime in (None, "", "not-a-component"):
        settings = {} if ime is None else {"default_input_method": ime}
        result = resolve_entry(
            _entry(RemoveIfNoResolvableActivity(".tutorial")),
            StaticEnvironment(secure_settings=settings),
        )
        assert result.entry.visible is False
        assert result.fault is Fault.PROPERTY_ABSENT


# ── RelabelOrRemoveToMatchingActivity ────────────────────────────────

def test_relabel_to_matching_system_activity():
    env = StaticEnvironment(activities={TERMS: [
        ActivityMatch("com.android.settings", "Terms", "Google legal", system=True),
    ]})
    result = resolve_entry(_entry(RelabelOrRemoveToMatchingActivity(TERMS), title="Terms"), env)
    assert result.outcome == RELABEL
    assert result.entry.title == "Google legal"
    assert result.entry.visible is True


def test_relabel_removed_with_no_handler():
    result = resolve_entry(_entry(RelabelOrRemoveToMatchingActivity(TERMS)), StaticEnvironment())
    assert result.entry.visible is False
    assert result.fault is Fault.NO_MATCHING_HANDLER


def test_relabel_ignores_non_system_handlers():
    env = StaticEnvironment(activities={TERMS: [
        ActivityMatch("com.example.sideload", "Terms", "Sideloaded", system=False),
    ]})
    result = resolve_entry(_entry(RelabelOrRemoveToMatchingActivity(TERMS)), env)
    assert result.outcome == REMOVE


def test_relabel_first_system_handler_wins():
    env = StaticEnvironment(activities={TERMS: [
        ActivityMatch("com.example.sideload", "Terms", "Sideloaded", system=False),
        ActivityMatch("com.vendor.legal", "Terms", "Vendor terms", system=True),
        ActivityMatch("com.android.settings", "Terms", "Google legal", system=True),
    ]})
    result = resolve_entry(_entry(RelabelOrRemoveToMatchingActivity(TERMS)), env)
    assert result.entry.title == "Vendor terms"


def test_relabel_keeps_layout_title_when_handler_has_no_label():
    env = StaticEnvironment(activities={TERMS: [
        ActivityMatch("com.android.settings", "Terms", None, system=True),
    ]})
    result = resolve_entry(_entry(RelabelOrRemoveToMatchingActivity(TERMS), title="Terms"), env)
    assert result.outcome == RELABEL
    assert result.entry.title == "Terms"


# ── RemoveIfFeatureDisabled ──────────────────────────────────────────

def test_feature_flag():
    rule = RemoveIfFeatureDisabled("config_additional_system_update_setting_enable")
    off = resolve([_entry(rule)], StaticEnvironment())
    on = resolve([_entry(rule)], StaticEnvironment(flags={rule.flag: True}))
    assert off[0].visible is False
    assert on[0].visible is True


# ── Whole pass ───────────────────────────────────────────────────────

def test_entries_without_rule_pass_through():
    entry = PreferenceEntry(key="device_model", title="Model number")
    assert resolve([entry], StaticEnvironment()) == [entry]


def test_resolve_is_idempotent_and_order_independent():
    env = StaticEnvironment(
        properties={"x": "set"},
        activities={TERMS: [ActivityMatch("com.android.settings", "T", "Legal", system=True)]},
    )
    entries = [
        _entry(RemoveIfPropertyEmpty("x"), key="a"),
        _entry(RemoveIfPropertyEmpty("y"), key="b"),
        _entry(RelabelOrRemoveToMatchingActivity(TERMS), key="c"),
        _entry(RemoveIfFeatureDisabled("f"), key="d"),
    ]
    first = resolve(entries, env)
    assert resolve(entries, env) == first
    assert list(reversed(resolve(list(reversed(entries)), env))) == first


def test_resolve_with_faults_reports_outcomes():
    entries = [
        _entry(RemoveIfPropertyEmpty("x"), key="a"),
        PreferenceEntry(key="b"),
    ]
    results = resolve_with_faults(entries, StaticEnvironment())
    assert [(r.outcome, r.fault) for r in results] == [
        (REMOVE, Fault.PROPERTY_ABSENT),
        (KEEP, None),
    ]
