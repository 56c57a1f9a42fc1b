#!/usr/bin/env python3
"""
Streamlit UI for previewing pie charts.

Upload a chart description (.toml) or a table (.csv / .xlsx), tweak the legend
position and radius from the sidebar, preview the SVG and download it. The chart
itself is built by the same pipeline as build_pie_charts.py.
"""
from __future__ import annotations

import traceback
from pathlib import Path
from typing import List, Optional

import pandas as pd
import streamlit as st

from chart_input import apply_overrides, load_table, parse_chart
from pie_config import DEFAULT_LEGEND_POSITION, DEFAULT_RADIUS, LEGEND_POSITIONS
from pie_errors import ParseError, PieChartError
from pie_svg import render_svg

# ----------------------------
# Project layout & constants
# ----------------------------
HERE = Path(__file__).resolve().parent
RUNS_DIR = HERE / "runs"
TABLE_TYPES = ("csv", "xlsx")

# ----------------------------
# Helpers
# ----------------------------

def log(msg: str) -> None:
    st.session_state.setdefault("log", [])
    st.session_state.log.append(msg)


def reset_log() -> None:
    st.session_state["log"] = []


def safe_slug(text: str) -> str:
    s = "".join(ch if ch.isalnum() else "_" for ch in str(text).strip())
    while "__" in s:
        s = s.replace("__", "_")
    return s.strip("_") or "chart"


def build_preview(
    source: Path,
    label_col: Optional[str] = None,
    value_col: Optional[str] = None,
    legend_position: Optional[str] = None,
    radius: Optional[float] = None,
    show_labels: bool = True,
) -> str:
    """Parse ``source`` (a saved upload) and render it with the sidebar overrides."""
    if source.suffix.lower().lstrip(".") in TABLE_TYPES:
        chart = load_table(source, label_col, value_col)
    else:
        try:
            text = source.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"{source.name} is not UTF-8 text (byte {exc.start})") from exc
        chart = parse_chart(text)
    chart = apply_overrides(chart, legend_position=legend_position, radius=radius)
    return render_svg(chart, show_labels=show_labels)


def table_columns(source: Path) -> List[str]:
    if source.suffix.lower() == ".xlsx":
        return [str(c) for c in pd.read_excel(source, nrows=0).columns]
    return [str(c) for c in pd.read_csv(source, nrows=0).columns]

# ----------------------------
# Streamlit UI
# ----------------------------

def main() -> None:
    st.set_page_config(page_title="Pie Chart Builder", page_icon="🥧", layout="centered")
    if "log" not in st.session_state:
        reset_log()

    st.title("Pie Chart Builder")
    st.caption("Upload a chart description or a table and download the SVG.")

    with st.sidebar:
        st.header("Options")
        legend_position = st.selectbox(
            "Legend position", LEGEND_POSITIONS, index=LEGEND_POSITIONS.index(DEFAULT_LEGEND_POSITION)
        )
        radius = st.number_input("Radius (px)", min_value=20.0, max_value=1000.0, value=DEFAULT_RADIUS, step=10.0)
        show_labels = st.checkbox("Percentage labels", value=True)

    uploaded = st.file_uploader("Upload chart (.toml, .csv, .xlsx)", type=["toml", *TABLE_TYPES],
                                accept_multiple_files=False)

    st.write("### Log")
    log_area = st.empty()
    log_area.code("\n".join(st.session_state.log) or "Ready.", language="text")

    if not uploaded:
        return

    reset_log()
    # Save the upload under ./runs/YYYYMMDD_HHMMSS so pandas/tomllib read a real file
    run_root = RUNS_DIR / pd.Timestamp.now(tz=None).strftime("%Y%m%d_%H%M%S")
    run_root.mkdir(parents=True, exist_ok=True)
    source = run_root / f"source{Path(uploaded.name).suffix.lower()}"
    with open(source, "wb") as f:
        f.write(uploaded.read())

    label_col = value_col = None
    if source.suffix.lstrip(".") in TABLE_TYPES:
        columns = table_columns(source)
        cols = st.columns(2)
        with cols[0]:
            label_col = st.selectbox("Label column", columns)
        with cols[1]:
            value_col = st.selectbox("Value column", columns, index=min(1, len(columns) - 1))

    try:
        log(f"▶️ Rendering {uploaded.name} …")
        svg = build_preview(source, label_col, value_col, legend_position, radius, show_labels)
        log("✅ Chart done.")
    except PieChartError as e:
        st.error(str(e))
        log(f"❌ {e}")
        log_area.code("\n".join(st.session_state.log), language="text")
        return
    except Exception as e:
        st.error("Run failed. See log below.")
        log(f"❌ Fatal error: {e}\n{traceback.format_exc()}")
        log_area.code("\n".join(st.session_state.log), language="text")
        return

    st.image(svg, use_container_width=True)
    st.download_button(
        "Download SVG",
        data=svg.encode("utf-8"),
        file_name=f"{safe_slug(Path(uploaded.name).stem)}.svg",
        mime="image/svg+xml",
        use_container_width=True,
    )

    # Persist log view
    log_area.code("\n".join(st.session_state.log), language="text")


if __name__ == "__main__":
    main()
