# pie_svg.py
# Pie chart (SVG) with a legend, clockwise from 12 o'clock.
# Colors and fonts live in an embedded <style> block (one class per wedge) so the
# file can be restyled by hand without regenerating it.
# Requires: pip install svgwrite

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import svgwrite

from chart_input import ChartInput, parse_chart
from pie_colors import allocate_colors
from pie_config import (
    BACKGROUND,
    FONT_FAMILY,
    LABEL_FONT_SIZE,
    LEGEND_CORNER_RADIUS,
    LEGEND_FONT_SIZE,
    SHOW_LABELS,
    TITLE_FONT_SIZE,
)
from pie_geometry import (
    WedgeGeometry,
    compute_wedges,
    label_anchor,
    layout_chart,
    wedge_path,
)

logger = logging.getLogger(__name__)


# =======================
# Text helpers
# =======================
def format_value(value: float) -> str:
    """12.0 -> '12', 1234.5 -> '1,234.5', 0.001 -> '0.001'."""
    if float(value).is_integer():
        return f"{int(value):,}"
    if round(value, 2) == 0:
        return f"{value:.3g}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def legend_text(label: str, value: float, unit: Optional[str]) -> str:
    if unit:
        return f"{label}: {format_value(value)} {unit}"
    return label


def _stylesheet(colors: Sequence[str]) -> str:
    rules = [
        f".title {{ font-family: {FONT_FAMILY}; font-size: {TITLE_FONT_SIZE:g}px; "
        "font-weight: bold; text-anchor: middle; fill: #222222; }",
        f".label {{ font-family: {FONT_FAMILY}; font-size: {LABEL_FONT_SIZE:g}px; "
        "dominant-baseline: middle; fill: #333333; }",
        f".legend {{ font-family: {FONT_FAMILY}; font-size: {LEGEND_FONT_SIZE:g}px; "
        "dominant-baseline: middle; fill: #222222; }",
        ".wedge { stroke: #ffffff; stroke-width: 1; }",
    ]
    for i, color in enumerate(colors):
        rules.append(f".wedge-{i} {{ fill: {color}; }}")
    return "\n".join(rules)


# =======================
# Renderer
# =======================
def render_svg(
    chart: ChartInput,
    wedges: Optional[List[WedgeGeometry]] = None,
    colors: Optional[List[str]] = None,
    show_labels: bool = SHOW_LABELS,
) -> str:
    """
    Build the SVG document for ``chart`` and return it as text.

    ``wedges`` and ``colors`` are computed from the chart when not given. Every
    wedge and its legend swatch share the CSS class ``wedge-<index>``.
    """
    if wedges is None:
        wedges = compute_wedges(chart.values)
    if colors is None:
        colors = allocate_colors(len(chart.slices), [s.color for s in chart.slices])
    assert len(wedges) == len(chart.slices) == len(colors)

    opts = chart.options
    texts = [legend_text(s.label, s.value, opts.unit) for s in chart.slices]
    lay = layout_chart(
        texts,
        radius=opts.radius,
        legend_position=opts.legend_position,
        has_title=bool(chart.title),
        show_labels=show_labels,
    )

    dwg = svgwrite.Drawing(size=(lay.width, lay.height), profile="full")
    dwg.attribs["viewBox"] = f"0 0 {lay.width:g} {lay.height:g}"
    dwg.attribs["style"] = f"background-color: {BACKGROUND};"
    dwg.embed_stylesheet(_stylesheet(colors))

    # title
    if chart.title and lay.title_pos:
        dwg.add(dwg.text(chart.title, insert=lay.title_pos, class_="title"))

    # slices
    pie = dwg.g(id="wedges")
    for i, wedge in enumerate(wedges):
        cls = f"wedge wedge-{i}"
        d = wedge_path(wedge, lay.cx, lay.cy, lay.radius)
        if d is None:
            pie.add(dwg.circle(center=(lay.cx, lay.cy), r=lay.radius, class_=cls))
        else:
            pie.add(dwg.path(d=d, class_=cls))
    dwg.add(pie)

    # percentage labels
    if show_labels:
        labels = dwg.g(id="labels")
        for wedge in wedges:
            x, y, anchor = label_anchor(wedge, lay.cx, lay.cy, lay.radius)
            labels.add(dwg.text(
                f"{round(wedge.fraction * 100)}%",
                insert=(round(x, 2), round(y, 2)),
                class_="label",
                text_anchor=anchor,
            ))
        dwg.add(labels)

    # legend, one row per slice in input order
    legend = dwg.g(id="legend")
    for i, (entry, text) in enumerate(zip(lay.legend, texts)):
        row = dwg.g(class_="legend-entry")
        row.add(dwg.rect(
            insert=entry.swatch,
            size=(lay.swatch_size, lay.swatch_size),
            rx=LEGEND_CORNER_RADIUS,
            ry=LEGEND_CORNER_RADIUS,
            class_=f"wedge-{i}",
        ))
        row.add(dwg.text(text, insert=entry.text, class_="legend"))
        legend.add(row)
    dwg.add(legend)

    logger.debug("rendered %d wedge(s) on a %gx%g canvas", len(wedges), lay.width, lay.height)
    return dwg.tostring()


def render_chart_text(text: str, show_labels: bool = SHOW_LABELS) -> str:
    """Parse the chart description and return the finished SVG document."""
    chart = parse_chart(text)
    wedges = compute_wedges(chart.values)
    colors = allocate_colors(len(chart.slices), [s.color for s in chart.slices])
    return render_svg(chart, wedges, colors, show_labels=show_labels)
