"""StateLens — Streamlit interactive dashboard."""

from __future__ import annotations

import io

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from dashboard.geo import build_map_figure, clicked_regions
from statelens.config import load_settings
from statelens.controller import AppController

st.set_page_config(
    page_title="StateLens — Sales by state",
    page_icon="🗺️",
    layout="wide",
    initial_sidebar_state="collapsed",
)


def get_controller() -> AppController:
    """One controller per browser session, loaded on first use."""
    if "controller" not in st.session_state:
        controller = AppController(load_settings())
        controller.load()
        # The frame URL carries the filter itself, so the panel can take
        # commands as soon as it is rendered.
        controller.mark_embed_ready()
        st.session_state.controller = controller
        st.session_state.map_key = 0
    return st.session_state.controller


def download_button_csv(df: pd.DataFrame, filename: str, label: str = "Download CSV"):
    """Render a CSV download button."""
    buf = io.BytesIO()
    df.to_csv(buf, index=False)
    st.download_button(label, buf.getvalue(), file_name=filename, mime="text/csv")


def download_button_excel(df: pd.DataFrame, filename: str, label: str = "Download Excel"):
    """Render an Excel download button."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name="data")
    st.download_button(label, buf.getvalue(), file_name=filename, mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def render_map(ctl: AppController):
    if ctl.boundaries is None:
        st.warning("Region boundaries are unavailable.")
        return

    values = dict(ctl.metrics.items())
    fig = build_map_figure(ctl.boundaries.to_geojson(), ctl.styles(), values)
    event = st.plotly_chart(
        fig,
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
        key=f"map-{st.session_state.map_key}",
    )

    points = event.selection.points if event and event.selection else []
    regions = clicked_regions(fig, points)
    if regions:
        for region in regions:
            ctl.click(region)
        # fresh widget key so the next click on the same region registers
        st.session_state.map_key += 1
        st.rerun()

    if not ctl.metrics.has_data:
        st.caption("No metric data, regions shown in the default color.")


def render_explore(ctl: AppController):
    if not ctl.explore_visible or ctl.panel_visible:
        return
    _, mid, _ = st.columns([1, 2, 1])
    with mid:
        if st.button("Explore More", type="primary", use_container_width=True):
            ctl.explore()
            st.rerun()


def render_panel(ctl: AppController):
    if not ctl.panel_visible:
        return
    header, close = st.columns([5, 1])
    with header:
        st.markdown(f"**{ctl.selection_label}** — Location Details")
    with close:
        if st.button("Close", use_container_width=True):
            ctl.close_panel()
            st.session_state.map_key += 1
            st.rerun()
    components.iframe(ctl.embed.frame_url(), height=800, scrolling=True)


def render_metrics_table(ctl: AppController):
    if not ctl.metrics.has_data:
        return
    df = pd.DataFrame(list(ctl.metrics.items()), columns=["region", "value"])
    df = df.sort_values("value", ascending=False)
    with st.expander("Metric data"):
        low, high = ctl.metrics.range()
        st.caption(f"Range: {low:,.0f} – {high:,.0f}")
        st.dataframe(df, use_container_width=True, hide_index=True)
        col1, col2 = st.columns(2)
        with col1:
            download_button_csv(df, "metrics.csv")
        with col2:
            download_button_excel(df, "metrics.xlsx")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

controller = get_controller()

st.title("🗺️ StateLens")
if controller.selection:
    st.caption(f"Selected: {controller.selection_label}")

if controller.panel_visible:
    map_col, panel_col = st.columns([1, 2])
    with map_col:
        render_map(controller)
    with panel_col:
        render_panel(controller)
else:
    render_map(controller)
    render_explore(controller)

render_metrics_table(controller)
