"""
demo_data.py — Realistic fake device for demo / presentation mode.

Activated when no Android device is connected via ADB. Returns a
StaticEnvironment so the screen assembly code does not need any branching.
"""

import random

from config import (
    CPUINFO_PATH,
    DEMO_CPUINFO,
    DEMO_DEFAULT_IME,
    DEMO_KERNEL_VERSION,
    DEMO_MEMINFO,
    DEMO_PROPERTIES,
    INTENT_ACTIONS,
    KERNEL_VERSION_PATH,
    KEY_COPYRIGHT,
    KEY_LICENSE,
    KEY_SYSTEM_UPDATE_SETTINGS,
    KEY_TERMS,
    MEMINFO_PATH,
    SECURE_DEFAULT_INPUT_METHOD,
)
from modules.environment import ActivityMatch, StaticEnvironment


# ── Helpers ──────────────────────────────────────────────────────────

def _jitter(value: int, pct: float = 0.05) -> int:
    """Add ± pct random noise to a value."""
    delta = int(value * pct)
    return value + random.randint(-delta, delta)


def _fake_meminfo() -> str:
    """DEMO_MEMINFO with Free / Cached nudged so refreshes look alive."""
    lines = DEMO_MEMINFO.splitlines(keepends=True)
    for idx in (1, 3):
        label, _, rest = lines[idx].partition(":")
        kb = int(rest.split()[0])
        lines[idx] = f"{label}:{_jitter(kb, 0.08):>16} kB\n"
    return "".join(lines)


_DEMO_HANDLERS = {
    KEY_TERMS: ActivityMatch("com.android.settings", "com.android.settings.TermsActivity",
                             "Google legal", system=True),
    KEY_LICENSE: ActivityMatch("com.android.settings", "com.android.settings.LicenseActivity",
                               "Open source licenses", system=True),
    KEY_COPYRIGHT: ActivityMatch("com.android.settings", "com.android.settings.CopyrightActivity",
                                 "Copyright", system=True),
    KEY_SYSTEM_UPDATE_SETTINGS: ActivityMatch("com.google.android.gms",
                                              "com.google.android.gms.update.SystemUpdateActivity",
                                              "System update", system=True),
}


# ── Public API ───────────────────────────────────────────────────────

def get_demo_environment() -> StaticEnvironment:
    """Return a Pixel-like device without a tutorial, team or contributors page."""
    return StaticEnvironment(
        properties=DEMO_PROPERTIES,
        secure_settings={SECURE_DEFAULT_INPUT_METHOD: DEMO_DEFAULT_IME},
        activities={INTENT_ACTIONS[key]: [match] for key, match in _DEMO_HANDLERS.items()},
        files={
            CPUINFO_PATH: DEMO_CPUINFO,
            MEMINFO_PATH: _fake_meminfo(),
            KERNEL_VERSION_PATH: DEMO_KERNEL_VERSION,
        },
    )
