# pie_colors.py
# Deterministic slice colors: explicit colors are kept, the rest are spread over an HSL hue wheel.

from __future__ import annotations

import colorsys
import math
from typing import Dict, List, Mapping, Optional, Sequence, Union

from pie_config import LIGHTNESS, SATURATION, SINGLE_COLOR, START_HUE, WHEEL_CAPACITY

GOLDEN_RATIO_CONJUGATE = 0.618033988749895

Overrides = Union[Sequence[Optional[str]], Mapping[int, str], None]


def hsl_hex(h: float, s: float = SATURATION, light: float = LIGHTNESS) -> str:
    r, g, b = colorsys.hls_to_rgb(h % 1.0, light, s)
    return "#{:02x}{:02x}{:02x}".format(round(r * 255), round(g * 255), round(b * 255))


def _stride(m: int) -> int:
    """Step through m wheel slots so consecutive picks land far apart (coprime with m)."""
    if m <= 2:
        return 1
    target = max(1, round(m * (1 - GOLDEN_RATIO_CONJUGATE)))
    for delta in range(m):
        for k in (target - delta, target + delta):
            if 1 <= k < m and math.gcd(k, m) == 1:
                return k
    return 1


def wheel_hues(m: int, capacity: int = WHEEL_CAPACITY, start: float = START_HUE) -> List[float]:
    """
    m hues on the wheel, evenly spaced, in drawing order.

    Beyond ``capacity`` the wheel wraps and hues repeat.
    """
    if m <= 0:
        return []
    slots = min(m, capacity)
    step = _stride(slots)
    return [(start + ((i * step) % slots) / slots) % 1.0 for i in range(m)]


def _normalize_overrides(n: int, overrides: Overrides) -> List[Optional[str]]:
    if overrides is None:
        return [None] * n
    if isinstance(overrides, Mapping):
        return [overrides.get(i) for i in range(n)]
    out = list(overrides)[:n]
    return out + [None] * (n - len(out))


def allocate_colors(n: int, overrides: Overrides = None) -> List[str]:
    """
    One color per slice, index aligned.

    ``overrides`` holds explicit colors (a list with None for open slots, or an
    index -> color mapping); they are returned untouched. The open slots get
    hues from ``wheel_hues`` in slot order. Same input, same output.
    """
    slots = _normalize_overrides(n, overrides)
    open_idx = [i for i, c in enumerate(slots) if not c]
    if len(open_idx) == 1:
        fill = [SINGLE_COLOR]
    else:
        fill = [hsl_hex(h) for h in wheel_hues(len(open_idx))]

    colors: Dict[int, str] = dict(zip(open_idx, fill))
    return [slots[i] if slots[i] else colors[i] for i in range(n)]
