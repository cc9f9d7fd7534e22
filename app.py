"""
Comparative Yield -> Production: Interactive App

Run with:  streamlit run app.py
"""

import logging
import sys
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
import plotly.express as px
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent))

from cy_production.config import BAG_NUMBERS, LBS_PER_ACRE_FACTOR
from cy_production.calibration import build_slope_table
from cy_production.dashboard import (
    export_production,
    export_template,
    get_dataset_summary,
    upload_production_files,
    upload_raw_files,
)
from cy_production.session import Session
from cy_production.simulator import generate_production_file, generate_raw_export
from cy_production.transforms import compute_production

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Comparative Yield → Production",
    page_icon="🌾",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------
if "session" not in st.session_state:
    st.session_state.session = Session()
    st.session_state.status = ""
    st.session_state.raw_key = 0
    st.session_state.prod_key = 0
    st.session_state.downloads = {}

session: Session = st.session_state.session


def _set_status(message: str) -> None:
    st.session_state.status = message


def _data_version() -> tuple[int, int]:
    """Row counts of both datasets; uploads only append, so any change shows here."""
    return (len(session.cy_rows), len(session.prod_rows))


def _clear_downloads() -> None:
    st.session_state.downloads = {}


def _remember_download(key: str, result) -> None:
    if result.payload is None:
        st.session_state.downloads.pop(key, None)
    else:
        st.session_state.downloads[key] = (_data_version(), result)


def _show_download(key: str) -> None:
    """Offer a stored export only while the data it was built from is unchanged."""
    entry = st.session_state.downloads.get(key)
    if entry is None:
        return
    version, res = entry
    if version != _data_version():
        st.session_state.downloads.pop(key, None)
        return
    st.download_button(
        f"Download {res.filename}", res.payload, file_name=res.filename,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key=f"download_{key}",
    )


def _as_pairs(uploaded) -> list[tuple[str, bytes]]:
    return [(f.name, f.getvalue()) for f in uploaded or []]


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.title("CY → Production")
st.sidebar.markdown(
    f"Bags per site: **{', '.join(map(str, BAG_NUMBERS))}**  \n"
    f"lbs/acre factor: **{LBS_PER_ACRE_FACTOR}**"
)
st.sidebar.divider()

if st.sidebar.button("Load demo data"):
    _clear_downloads()
    upload_raw_files(session, [("demo_RAW_export.xlsx", generate_raw_export())])
    result = upload_production_files(
        session, [("demo_production.xlsx", generate_production_file(session.cy_rows))]
    )
    _set_status(f"Demo data loaded. {result.status}")

if st.sidebar.button("Clear all data"):
    session.reset()
    _clear_downloads()
    _set_status("Cleared.")

# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
st.title("Comparative Yield → Production App")
st.markdown(
    "1) Upload RAW Excel exports to build a combined **Comparative Yield** dataset "
    "and export a 3-row-per-site production template.  \n"
    "2) Fill that template in the field (Bag #, NET WT.) and upload it here.  \n"
    "3) Export a **Production (lbs/acre)** table per KA."
)
st.divider()

summary = get_dataset_summary(session)

# ===========================================================================
# STEP 1: RAW exports
# ===========================================================================
st.header("Step 1: Upload RAW export(s)")
raw_files = st.file_uploader(
    "RAW exports", type=["xlsx"], accept_multiple_files=True,
    key=f"raw_{st.session_state.raw_key}",
)
if st.button("Add RAW files", disabled=not raw_files):
    _clear_downloads()
    _set_status(upload_raw_files(session, _as_pairs(raw_files)).status)
    st.session_state.raw_key += 1
    st.rerun()

st.caption(
    f"Loaded CY rows: **{summary['cy_rows']}** | Distinct KAs: **{summary['cy_distinct_kas']}**"
)

if st.button("Export 3-row-per-site Production Template", disabled=not session.cy_rows):
    result = export_template(session)
    _set_status(result.status)
    _remember_download("template", result)

_show_download("template")

st.divider()

# ===========================================================================
# STEP 2: Filled production files
# ===========================================================================
st.header("Step 2: Upload filled Production file(s)")
prod_files = st.file_uploader(
    "Filled production files", type=["xlsx"], accept_multiple_files=True,
    key=f"prod_{st.session_state.prod_key}",
)
if st.button("Add production files", disabled=not prod_files):
    _clear_downloads()
    _set_status(upload_production_files(session, _as_pairs(prod_files)).status)
    st.session_state.prod_key += 1
    st.rerun()

st.caption(
    f"Loaded production rows: **{summary['prod_rows']}** | "
    f"Distinct KAs: **{summary['prod_distinct_kas']}**"
)

if st.button(
    "Export Production (lbs/acre) from CY + Bag NET WT.",
    disabled=not (session.cy_rows and session.prod_rows),
):
    result = export_production(session)
    _set_status(result.status)
    _remember_download("production", result)

_show_download("production")

st.divider()
st.markdown(f"**Status:** {st.session_state.status or 'Idle'}")

# ===========================================================================
# Results preview
# ===========================================================================
if session.cy_rows and session.prod_rows:
    st.divider()
    st.header("Results")
    production = compute_production(session.cy_rows, session.prod_rows)

    if production.missing_kas:
        st.warning(
            "No calibration found for KAs: " + ", ".join(map(str, production.missing_kas))
        )

    col1, col2 = st.columns([3, 2])

    with col1:
        st.subheader("Production (lbs/acre)")
        if production.rows.empty:
            st.info("No Production rows could be computed.")
        else:
            st.dataframe(production.rows, use_container_width=True, hide_index=True)

            chart_df = production.rows.copy()
            chart_df["site"] = (
                chart_df["PASTURE"] + " · " + chart_df["KA"].astype(str)
                + " (" + chart_df["DATE"].astype(str) + ")"
            )
            fig = go.Figure(go.Bar(
                x=chart_df["Production (lbs/acre)"],
                y=chart_df["site"],
                orientation="h",
                marker_color="#2ecc71",
                text=chart_df["Production (lbs/acre)"].apply(lambda x: f"{x:,.0f}"),
                textposition="outside",
            ))
            fig.update_layout(
                height=max(300, 40 * len(chart_df)),
                xaxis_title="lbs/acre",
                yaxis_title="",
                plot_bgcolor="rgba(0,0,0,0)",
                margin=dict(l=10, r=10, t=10, b=40),
            )
            st.plotly_chart(fig, use_container_width=True)

    with col2:
        st.subheader("Calibration by KA")
        slope_table = build_slope_table(session.prod_rows, production.slopes)
        st.dataframe(slope_table, use_container_width=True, hide_index=True)

        points = pd.DataFrame({
            "KA": [str(r.ka) for r in session.prod_rows],
            "BAG #": [r.bag_number for r in session.prod_rows],
            "NET WT.": [r.net_weight for r in session.prod_rows],
        }).dropna()

        if not points.empty:
            fig = px.scatter(points, x="BAG #", y="NET WT.", color="KA")
            x_max = max(BAG_NUMBERS)
            for ka, slope in production.slopes.items():
                fig.add_trace(go.Scatter(
                    x=[0, x_max],
                    y=[0, slope * x_max],
                    mode="lines",
                    name=f"{ka} fit",
                    line=dict(dash="dash"),
                ))
            fig.update_layout(
                height=400,
                xaxis_title="BAG #",
                yaxis_title="NET WT. (g)",
                plot_bgcolor="rgba(0,0,0,0)",
                margin=dict(l=10, r=10, t=10, b=40),
            )
            st.plotly_chart(fig, use_container_width=True)
