# pie_geometry.py
# Wedge angles, SVG path descriptions and canvas/legend layout for the pie chart.
# Angles are radians, measured clockwise from 12 o'clock.

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pie_config import (
    GUTTER,
    LABEL_FONT_SIZE,
    LABEL_OFFSET,
    LEGEND_FONT_SIZE,
    LEGEND_ROW_HEIGHT,
    LEGEND_SWATCH,
    TITLE_FONT_SIZE,
)

logger = logging.getLogger(__name__)

TAU = 2.0 * math.pi
EPSILON = 1e-9


@dataclass(frozen=True)
class WedgeGeometry:
    start_angle: float
    end_angle: float
    fraction: float
    sweep_flag: bool
    large_arc_flag: bool
    mid_angle: float
    full_circle: bool = False

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle


@dataclass(frozen=True)
class LegendEntry:
    swatch: Tuple[float, float]     # top-left corner of the swatch
    text: Tuple[float, float]       # text insert point (start anchor)


@dataclass(frozen=True)
class ChartLayout:
    width: float
    height: float
    cx: float
    cy: float
    radius: float
    title_pos: Optional[Tuple[float, float]]
    legend: List[LegendEntry]
    swatch_size: float


# =======================
# Wedges
# =======================
def compute_wedges(values: Sequence[float]) -> List[WedgeGeometry]:
    """
    Split the full turn between ``values`` (all > 0) in order.

    The running angle starts at 0; the last wedge is closed exactly on 2*pi so
    float drift never leaves a gap or an overlap at 12 o'clock.
    """
    if not values:
        return []
    # scale by the largest value first so huge finite inputs cannot overflow the sum
    peak = float(max(values))
    scaled = [float(v) / peak for v in values]
    total = sum(scaled)
    wedges: List[WedgeGeometry] = []
    running = 0.0
    last = len(values) - 1
    for i, value in enumerate(scaled):
        frac = value / total
        start = running
        end = TAU if i == last else running + frac * TAU
        full = abs(frac - 1.0) <= EPSILON
        wedges.append(WedgeGeometry(
            start_angle=start,
            end_angle=end,
            fraction=frac,
            sweep_flag=True,
            large_arc_flag=(end - start) > math.pi + EPSILON,
            mid_angle=(start + end) / 2.0,
            full_circle=full,
        ))
        running = end
    return wedges


def point_on_circle(cx: float, cy: float, r: float, angle: float) -> Tuple[float, float]:
    # SVG y grows downwards: angle 0 is straight up, pi/2 is 3 o'clock
    return cx + r * math.sin(angle), cy - r * math.cos(angle)


def wedge_path(wedge: WedgeGeometry, cx: float, cy: float, r: float) -> Optional[str]:
    """SVG path for one wedge, or None when it must be drawn as a full circle."""
    if wedge.full_circle or wedge.sweep >= TAU - EPSILON:
        return None
    x0, y0 = point_on_circle(cx, cy, r, wedge.start_angle)
    x1, y1 = point_on_circle(cx, cy, r, wedge.end_angle)
    large = 1 if wedge.large_arc_flag else 0
    sweep = 1 if wedge.sweep_flag else 0
    return " ".join([
        f"M {cx:.3f},{cy:.3f}",
        f"L {x0:.3f},{y0:.3f}",
        f"A {r:.3f},{r:.3f} 0 {large} {sweep} {x1:.3f},{y1:.3f}",
        "Z",
    ])


def label_anchor(wedge: WedgeGeometry, cx: float, cy: float, r: float,
                 offset: float = LABEL_OFFSET) -> Tuple[float, float, str]:
    """Point just outside the wedge along its mid angle, plus the text-anchor to use."""
    x, y = point_on_circle(cx, cy, r + offset, wedge.mid_angle)
    s = math.sin(wedge.mid_angle)
    if abs(s) < 0.2:
        anchor = "middle"
    else:
        anchor = "start" if s > 0 else "end"
    return x, y, anchor


# =======================
# Layout
# =======================
def estimate_text_width(text: str, font_size: float) -> float:
    """Rough width in px for sans-serif text."""
    char_px = 0.55
    return max(1.0, len(str(text)) * font_size * char_px)


def layout_chart(
    legend_texts: Sequence[str],
    radius: float,
    legend_position: str = "right",
    has_title: bool = False,
    show_labels: bool = True,
    gutter: float = GUTTER,
) -> ChartLayout:
    """
    Size the canvas around the pie and place one legend row per entry.

    ``right`` stacks the legend in a column beside the pie, ``bottom`` stacks it
    under the pie, left aligned with it.
    """
    # room for the percentage labels outside the pie
    label_room = (LABEL_OFFSET + estimate_text_width("100%", LABEL_FONT_SIZE)) if show_labels else 0.0
    title_h = TITLE_FONT_SIZE * 2 if has_title else 0.0

    text_w = max((estimate_text_width(t, LEGEND_FONT_SIZE) for t in legend_texts), default=0.0)
    legend_w = LEGEND_SWATCH + 8 + text_w
    legend_h = LEGEND_ROW_HEIGHT * len(legend_texts)

    pie_box = 2 * (radius + label_room)
    top = gutter + title_h
    cx = gutter + label_room + radius
    cy = top + label_room + radius

    if legend_position == "bottom":
        width = max(gutter + pie_box + gutter, gutter + legend_w + gutter)
        cx = max(cx, width / 2)
        legend_x = gutter
        legend_y = top + pie_box + gutter / 2
        height = legend_y + legend_h + gutter
    else:
        legend_x = gutter + pie_box + gutter
        width = legend_x + legend_w + gutter
        legend_y = max(top, cy - legend_h / 2)
        height = max(top + pie_box, legend_y + legend_h) + gutter

    legend = []
    for i in range(len(legend_texts)):
        row_y = legend_y + i * LEGEND_ROW_HEIGHT
        swatch_y = row_y + (LEGEND_ROW_HEIGHT - LEGEND_SWATCH) / 2
        legend.append(LegendEntry(
            swatch=(round(legend_x, 2), round(swatch_y, 2)),
            text=(round(legend_x + LEGEND_SWATCH + 8, 2), round(row_y + LEGEND_ROW_HEIGHT / 2, 2)),
        ))

    title_pos = (round(width / 2, 2), round(gutter + TITLE_FONT_SIZE, 2)) if has_title else None
    logger.debug("layout %s: %.0fx%.0f, pie at (%.1f, %.1f) r=%.1f",
                 legend_position, width, height, cx, cy, radius)
    return ChartLayout(
        width=round(width, 2),
        height=round(height, 2),
        cx=round(cx, 2),
        cy=round(cy, 2),
        radius=radius,
        title_pos=title_pos,
        legend=legend,
        swatch_size=LEGEND_SWATCH,
    )
