"""
Configuration constants for the Device Info settings screen.
"""

# ── Refresh & Timing ─────────────────────────────────────────────────
REFRESH_INTERVAL_MS = 30000         # Optional auto-refresh interval (milliseconds)
ADB_TIMEOUT_SECONDS = 10            # Max wait time for any ADB command
CACHE_TTL_SECONDS = 25              # How long to serve a cached screen before re-loading

# ── Pseudo-file sources ──────────────────────────────────────────────
CPUINFO_PATH = "/proc/cpuinfo"
MEMINFO_PATH = "/proc/meminfo"
KERNEL_VERSION_PATH = "/proc/version"

MAX_LINE_CHARS = 1000               # Per-line read limit for pseudo-files
MEMINFO_LINES = 4                   # Total, Free, Buffers, Cached

# ── Fallback strings ─────────────────────────────────────────────────
CPU_ERROR_SENTINEL = "error"
DEVICE_INFO_DEFAULT = "Unavailable"  # Placeholder when a value cannot be read

# ── System properties & settings ─────────────────────────────────────
PROPERTY_BASEBAND = "gsm.version.baseband"
PROPERTY_MODEL = "ro.product.model"
PROPERTY_FIRMWARE = "ro.build.version.release"
PROPERTY_BUILD_NUMBER = "ro.build.display.id"
PROPERTY_URL_SAFETYLEGAL = "ro.url.safetylegal"

SECURE_DEFAULT_INPUT_METHOD = "default_input_method"
TUTORIAL_INTENT_SUFFIX = ".tutorial"

# Boolean resource flags. The stock value applies when the device
# does not override it (demo mode, local host).
FLAG_ADDITIONAL_UPDATE_SETTING = "config_additional_system_update_setting_enable"
FEATURE_FLAG_DEFAULTS = {
    FLAG_ADDITIONAL_UPDATE_SETTING: False,
}

# ── Preference keys ──────────────────────────────────────────────────
KEY_TUTORIAL = "system_tutorial"
KEY_MODEL = "device_model"
KEY_FIRMWARE = "firmware_version"
KEY_BASEBAND = "baseband_version"
KEY_KERNEL = "kernel_version"
KEY_BUILD_NUMBER = "build_number"
KEY_CPU = "device_cpu"
KEY_MEMORY = "device_memory"
KEY_SAFETY_LEGAL = "safetylegal"
KEY_CONTAINER = "container"
KEY_TERMS = "terms"
KEY_LICENSE = "license"
KEY_COPYRIGHT = "copyright"
KEY_TEAM = "team"
KEY_SYSTEM_UPDATE_SETTINGS = "system_update_settings"
KEY_CONTRIBUTORS = "contributors"
KEY_UPDATE_SETTING = "additional_system_update_settings"

# Intent action each activity-backed entry points at.
INTENT_ACTIONS = {
    KEY_TERMS:                  "android.settings.TERMS",
    KEY_LICENSE:                "android.settings.LICENSE",
    KEY_COPYRIGHT:              "android.settings.COPYRIGHT",
    KEY_TEAM:                   "android.settings.TEAM",
    KEY_SYSTEM_UPDATE_SETTINGS: "android.settings.SYSTEM_UPDATE_SETTINGS",
    KEY_CONTRIBUTORS:           "android.settings.CONTRIBUTORS",
}

# ── Screen layout ────────────────────────────────────────────────────
# (key, title, parent) in display order. Parent None = root screen.
DEVICE_INFO_LAYOUT = [
    (KEY_TUTORIAL,               "System tutorial",          None),
    (KEY_SAFETY_LEGAL,           "Safety information",       None),
    (KEY_CONTAINER,              "Legal information",        None),
    (KEY_TERMS,                  "Terms",                    KEY_CONTAINER),
    (KEY_LICENSE,                "Open source licenses",     KEY_CONTAINER),
    (KEY_COPYRIGHT,              "Copyright",                KEY_CONTAINER),
    (KEY_TEAM,                   "Team",                     KEY_CONTAINER),
    (KEY_SYSTEM_UPDATE_SETTINGS, "System updates",           None),
    (KEY_UPDATE_SETTING,         "Additional system updates", None),
    (KEY_CONTRIBUTORS,           "Contributors",             None),
    (KEY_MODEL,                  "Model number",             None),
    (KEY_FIRMWARE,               "Android version",          None),
    (KEY_BASEBAND,               "Baseband version",         None),
    (KEY_KERNEL,                 "Kernel version",           None),
    (KEY_BUILD_NUMBER,           "Build number",             None),
    (KEY_CPU,                    "Processor",                None),
    (KEY_MEMORY,                 "Memory",                   None),
]

# ── Demo Data Defaults ───────────────────────────────────────────────
DEMO_CPUINFO = (
    "Processor\t: ARMv7 Processor rev 2 (v7l)\n"
    "BogoMIPS\t: 996.14\n"
    "Features\t: swp half thumb fastmult vfp edsp neon vfpv3\n"
)
DEMO_MEMINFO = (
    "MemTotal:        1048576 kB\n"
    "MemFree:          204800 kB\n"
    "Buffers:            1024 kB\n"
    "Cached:           819200 kB\n"
    "SwapCached:            0 kB\n"
)
DEMO_KERNEL_VERSION = (
    "Linux version 3.0.8-g1234abc (android-build@vpbs1) "
    "(gcc version 4.4.3 (GCC) ) #1 SMP PREEMPT Tue Oct 4 12:00:00 PDT 2011\n"
)
DEMO_PROPERTIES = {
    PROPERTY_MODEL:         "Pixel 7 (Demo)",
    PROPERTY_FIRMWARE:      "14",
    PROPERTY_BUILD_NUMBER:  "UQ1A.240205.004",
    PROPERTY_BASEBAND:      "g5300q-230927-231102-B-11002133",
    PROPERTY_URL_SAFETYLEGAL: "",
}
DEMO_DEFAULT_IME = "com.android.inputmethod.latin/.LatinIME"
