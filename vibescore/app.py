"""
VibeScore - Streamlit Web App
=============================

Interactive front end for the scoring engine and the accessible radar chart.

Run with:
    streamlit run vibescore/app.py
"""

import html
import json
import os
import sys
import time

import streamlit as st

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from vibescore.cli import load_payload
from vibescore.config import GRADE_TABLES, get_grade_table_name
from vibescore.interaction import InteractionController, ManualScheduler
from vibescore.layout import DeviceClass, ResponsiveLayoutEngine
from vibescore.narrator import score_announcement
from vibescore.observers import LoggingObserver, configure_logging
from vibescore.renderer import RadarChartRenderer, SvgSurface
from vibescore.scoring import ScoreAggregator, benchmark_tier, distribution, score_color

configure_logging()

DEMO_BREAKDOWN = {
    "codeQuality": 95,
    "readability": 80,
    "collaboration": 90,
    "innovation": 70,
    "security": 64,
    "performance": 58,
    "testingQuality": 42,
    "communityHealth": 35,
}


# =============================================================================
# PAGE CONFIG
# =============================================================================
st.set_page_config(
    page_title="VibeScore",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# =============================================================================
# CUSTOM CSS
# =============================================================================
st.markdown("""
<style>
    .main-header {
        font-size: 3rem;
        font-weight: bold;
        background: linear-gradient(90deg, #0EA5E9, #6366F1);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
        text-align: center;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        text-align: center;
        color: #888;
        margin-bottom: 2rem;
    }
    .stat-box {
        background: #0F172A;
        border-radius: 10px;
        padding: 1rem;
        text-align: center;
    }
    .stat-value {
        font-size: 2rem;
        font-weight: bold;
    }
    .stat-label {
        font-size: 0.8rem;
        color: #888;
    }
    .sr-only {
        position: absolute;
        width: 1px;
        height: 1px;
        overflow: hidden;
        clip: rect(0, 0, 0, 0);
        white-space: nowrap;
    }
    .live-region {
        background: #F1F5F9;
        border-left: 4px solid #0EA5E9;
        border-radius: 6px;
        padding: 0.6rem 0.9rem;
        color: #0F172A;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_controller() -> InteractionController:
    """One interaction controller per browser session."""
    if "controller" not in st.session_state:
        scheduler = ManualScheduler(now=time.monotonic())
        st.session_state["controller"] = InteractionController(
            scheduler=scheduler,
            observer=LoggingObserver(),
        )
        st.session_state["points_key"] = None
    return st.session_state["controller"]


def parse_breakdown(text: str):
    """Parse the JSON text area; accepts a bare breakdown or {breakdown, weights}."""
    return load_payload(json.loads(text) if text.strip() else {})


def stat_box(value: str, label: str, color: str = "#0EA5E9"):
    st.markdown(f"""
    <div class="stat-box">
        <div class="stat-value" style="color: {color}">{value}</div>
        <div class="stat-label">{label}</div>
    </div>
    """, unsafe_allow_html=True)


def render_score(breakdown, weights, aggregator: ScoreAggregator):
    """Overall score header with grade, benchmark and distribution."""
    overall = aggregator.aggregate(breakdown, weights)
    tier = benchmark_tier(overall.value)
    dist = distribution(breakdown)

    col1, col2, col3 = st.columns(3)
    with col1:
        stat_box(f"{overall.value}", "Vibe Score", score_color(overall.value))
    with col2:
        stat_box(overall.grade.label, "Grade")
    with col3:
        stat_box(tier["label"] if tier else "-", "Benchmark Tier")

    st.markdown(f"**{overall.title}** {overall.message}")
    st.caption(f"{dist['strong']} strong · {dist['moderate']} moderate · {dist['weak']} weak metrics")
    st.markdown(
        f'<div role="status" aria-live="polite" class="sr-only">{html.escape(score_announcement(overall))}</div>',
        unsafe_allow_html=True,
    )


def render_navigation(controller: InteractionController):
    """Keyboard-equivalent buttons that drive the interaction controller."""
    cols = st.columns(8)
    actions = [
        ("🎯 Focus", controller.focus),
        ("⏮ Home", lambda: controller.key("Home")),
        ("◀ Prev", lambda: controller.key("ArrowLeft")),
        ("Next ▶", lambda: controller.key("ArrowRight")),
        ("End ⏭", lambda: controller.key("End")),
        ("🔍 Details", lambda: controller.key("Enter")),
        ("✖ Close", lambda: controller.key("Escape")),
        ("🚪 Blur", controller.blur),
    ]
    for col, (label, action) in zip(cols, actions):
        with col:
            if st.button(label, use_container_width=True):
                action()
                st.rerun()


# =============================================================================
# MAIN APP
# =============================================================================

def main():
    """Main Streamlit app."""

    st.markdown('<h1 class="main-header">📊 VibeScore</h1>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Weighted repository vibes on an accessible radar chart</p>',
                unsafe_allow_html=True)

    controller = get_controller()
    # Fire any tooltip dismiss timer that expired since the last rerun
    controller.scheduler.run_due(time.monotonic())

    with st.sidebar:
        st.header("⚙️ Settings")

        st.subheader("🖥️ Device")
        device_choice = st.selectbox("Device class", ["auto"] + [d.value for d in DeviceClass])
        viewport_w = st.number_input("Viewport width", min_value=240, max_value=3840, value=1280, step=10)
        viewport_h = st.number_input("Viewport height", min_value=240, max_value=2160, value=720, step=10)
        container = st.slider("Container size", min_value=200, max_value=900, value=600, step=10)
        reduced_motion = st.checkbox("Reduce motion", value=False)

        st.markdown("---")

        st.subheader("🎛️ Scoring")
        tables = sorted(GRADE_TABLES)
        grade_table = st.selectbox("Grade table", tables, index=tables.index(get_grade_table_name()))

        st.markdown("---")

        with st.expander("ℹ️ About"):
            st.markdown("""
            **VibeScore** combines per-metric sub-scores into one weighted
            score and plots them on a radar chart.

            **How it works:**
            1. 📥 Paste a breakdown (metric key → 0-100 score)
            2. ⚖️ Scores are clamped and weighted by metric importance
            3. 📈 The chart places one axis per metric
            4. ⌨️ Use the buttons below the chart like arrow keys
            """)

    st.markdown("### 📥 Breakdown")
    text = st.text_area(
        "Breakdown JSON",
        value=json.dumps(DEMO_BREAKDOWN, indent=2),
        height=220,
        help='Either {"metric": score, ...} or {"breakdown": {...}, "weights": {...}}',
    )

    try:
        breakdown, weights = parse_breakdown(text)
    except (ValueError, TypeError) as e:
        st.error(f"❌ Error: {str(e)}")
        return

    aggregator = ScoreAggregator(grade_table=grade_table)
    st.markdown("---")
    render_score(breakdown, weights, aggregator)
    st.markdown("---")

    engine = ResponsiveLayoutEngine(reduced_motion=reduced_motion)
    device = None if device_choice == "auto" else device_choice
    layout = engine.layout((container, container), (viewport_w, viewport_h), device)

    renderer = RadarChartRenderer(registry=aggregator.registry)
    result = renderer.render(breakdown, layout)

    # New data or new layout: give the controller fresh points and anchors
    points_key = (tuple(result.points), tuple(result.anchors))
    if st.session_state.get("points_key") != points_key:
        controller.set_points(result.points, result.anchors)
        st.session_state["points_key"] = points_key

    st.subheader("🕸️ Radar Chart")
    render_navigation(controller)

    result = renderer.render(breakdown, layout, controller.state)
    if result.status == "error":
        st.error(f"❌ {result.message}")
    elif result.status == "empty":
        st.info(result.message)
    else:
        st.markdown(SvgSurface().render(result), unsafe_allow_html=True)

    st.markdown(
        f'<div class="live-region" role="status" aria-live="polite">'
        f'{html.escape(controller.announcement or result.summary)}</div>',
        unsafe_allow_html=True,
    )

    st.markdown("---")
    st.subheader("📋 Weighted Breakdown")
    rows = aggregator.rows(breakdown, weights, sort_by="contribution")
    if rows:
        st.dataframe([row.to_dict() for row in rows], use_container_width=True)
        st.download_button(
            label="📄 Download JSON",
            data=json.dumps([row.to_dict() for row in rows], indent=2),
            file_name="vibescore_breakdown.json",
            mime="application/json"
        )


if __name__ == "__main__":
    main()
