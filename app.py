"""
app.py — Streamlit "About phone" screen for an Android device.

Launch with:
    streamlit run app.py

Shows model, firmware, baseband, kernel, CPU and memory, and only the
legal / update rows the device actually has handlers for. Without a
device attached via ADB it runs on a simulated one (demo mode).
"""

import sys
import os

# ── Ensure project root is on sys.path so `config` / `modules` resolve ──
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import logging
import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from streamlit_autorefresh import st_autorefresh

from config import CACHE_TTL_SECONDS, KEY_CONTAINER, KEY_MODEL, REFRESH_INTERVAL_MS
from modules.adb_utils import is_device_connected
from modules.demo_data import get_demo_environment
from modules.device_info import DeviceInfoScreen, load_device_info, row_html
from modules.environment import AdbEnvironment

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
#  PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════

st.set_page_config(
    page_title="About phone",
    page_icon="📱",
    layout="centered",
    initial_sidebar_state="expanded",
)

# ═══════════════════════════════════════════════════════════════════════
#  SESSION STATE INIT
# ═══════════════════════════════════════════════════════════════════════

if "auto_refresh_on" not in st.session_state:
    st.session_state.auto_refresh_on = False
if "app_mode" not in st.session_state:
    st.session_state.app_mode = None        # None = not chosen, "demo", "live"

# Only auto-refresh when user explicitly enables it
if st.session_state.auto_refresh_on:
    st_autorefresh(interval=REFRESH_INTERVAL_MS, key="auto_refresh")


_SETTINGS_CSS = """
<style>
.pref-row {
    padding: 12px 16px;
    border-bottom: 1px solid rgba(255, 255, 255, 0.07);
}
.pref-row.child { padding-left: 36px; }
.pref-title { font-weight: 600; font-size: 1rem; color: #eef1f5; }
.pref-summary {
    font-size: 0.85rem;
    color: rgba(255, 255, 255, 0.55);
    white-space: pre-line;
}
</style>
"""

st.markdown(_SETTINGS_CSS, unsafe_allow_html=True)


# ═══════════════════════════════════════════════════════════════════════
#  DATA COLLECTION
# ═══════════════════════════════════════════════════════════════════════

@st.cache_data(ttl=CACHE_TTL_SECONDS)
def collect_live_screen() -> DeviceInfoScreen:
    """Load the screen from the attached device (cached to prevent ADB storms on rerun)."""
    return load_device_info(AdbEnvironment())


@st.cache_data(ttl=CACHE_TTL_SECONDS)
def collect_demo_screen() -> DeviceInfoScreen:
    """Load the screen from the simulated device."""
    return load_device_info(get_demo_environment())


# ═══════════════════════════════════════════════════════════════════════
#  MODE SELECTION SCREEN
# ═══════════════════════════════════════════════════════════════════════

def _render_mode_selection():
    """Show the mode selection landing page."""
    st.title("📱 About phone")
    st.caption("Device information for an Android phone")

    col_demo, col_live = st.columns(2)
    with col_demo:
        st.markdown("**Demo Mode**  \nA simulated device. No phone required.")
        if st.button("🖥️  Start Demo Mode", key="btn_demo", use_container_width=True):
            st.session_state.app_mode = "demo"
            st.rerun()
    with col_live:
        st.markdown("**Live Mode**  \nA real device over USB debugging.")
        if st.button("📲  Start Live Mode", key="btn_live", use_container_width=True):
            st.session_state.app_mode = "live"
            st.rerun()


def _render_not_connected():
    logger.info("Live mode selected but no device is attached")
    st.warning("No authorised Android device found over ADB.")
    st.info("💡 **Tip:** Enable USB debugging, tap **Allow** on the phone, then retry.")
    c1, c2 = st.columns(2)
    with c1:
        if st.button("🔄  Retry Detection", use_container_width=True):
            st.rerun()
    with c2:
        if st.button("← Back to Mode Selection", use_container_width=True):
            st.session_state.app_mode = None
            st.rerun()


# ═══════════════════════════════════════════════════════════════════════
#  PREFERENCE LIST
# ═══════════════════════════════════════════════════════════════════════

def _render_preferences(screen: DeviceInfoScreen):
    """Render visible rows the way a settings list shows them."""
    for entry in screen.visible_entries():
        if entry.key == KEY_CONTAINER:
            st.subheader(entry.title)
            continue
        st.markdown(
            row_html(entry),
            unsafe_allow_html=True,
        )


def _render_decisions(screen: DeviceInfoScreen):
    rows = [
        {
            "Key": r.entry.key,
            "Rule": type(r.entry.rule).__name__ if r.entry.rule else "—",
            "Outcome": r.outcome,
            "Title": r.entry.title or "",
            "Fault": screen.faults[r.entry.key].value if r.entry.key in screen.faults else "",
        }
        for r in screen.resolutions
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


def _render_memory(screen: DeviceInfoScreen):
    memory = screen.memory
    col1, col2 = st.columns(2)
    col1.metric("Available", f"{memory.available_mb} MB")
    col2.metric("Total", f"{memory.total_mb} MB")

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=memory.available_mb,
        number={"suffix": " MB"},
        title={"text": "Available memory"},
        gauge={
            "axis": {"range": [0, max(memory.total_mb, 1)]},
            "bar": {"color": "#00d4ff"},
        },
    ))
    fig.update_layout(
        height=300, margin=dict(t=60, b=20, l=40, r=40),
        paper_bgcolor="rgba(0,0,0,0)",
    )
    st.plotly_chart(fig, use_container_width=True)


# ═══════════════════════════════════════════════════════════════════════
#  MODE ROUTER — Decide what to show
# ═══════════════════════════════════════════════════════════════════════

if st.session_state.app_mode is None:
    _render_mode_selection()
    st.stop()

is_live = st.session_state.app_mode == "live"

if is_live and not is_device_connected():
    _render_not_connected()
    st.stop()

screen = collect_live_screen() if is_live else collect_demo_screen()


# ═══════════════════════════════════════════════════════════════════════
#  SIDEBAR
# ═══════════════════════════════════════════════════════════════════════

with st.sidebar:
    st.title("📱 Device")

    if is_live:
        st.success("🟢  LIVE — Device Connected")
    else:
        st.info("🖥️  DEMO MODE")

    model = screen.find_entry(KEY_MODEL)
    st.markdown(f"**Model:** {model.summary if model else 'N/A'}")
    st.divider()

    if st.button("🔄 Refresh Now"):
        if is_live:
            collect_live_screen.clear()
        else:
            collect_demo_screen.clear()
        st.rerun()

    st.toggle(
        "Auto-Refresh (30s)",
        key="auto_refresh_on",
        help="Reload device information every 30 seconds",
    )

    st.divider()

    if st.button("🔀 Switch Mode"):
        st.session_state.app_mode = None
        st.rerun()


# ═══════════════════════════════════════════════════════════════════════
#  TABS
# ═══════════════════════════════════════════════════════════════════════

st.title("About phone")

tab_info, tab_memory, tab_rules = st.tabs([
    "📋 Device Info",
    "🧠 Memory",
    "🔬 Row Decisions",
])

with tab_info:
    _render_preferences(screen)

with tab_memory:
    _render_memory(screen)

with tab_rules:
    _render_decisions(screen)
