# pie_config.py
# Cosmetic defaults for the pie chart builder, read from Configs/config.toml.
# Every value has a fallback here so the builder also works without the file.

import os
import tomllib  # stdlib (3.11+)
from pathlib import Path

# --- anchor everything to this file's folder ---
HERE = Path(__file__).parent


def _load_cfg(path: str | None = None) -> dict:
    cfg_path = Path(path or os.environ.get("PIE_CHART_CONFIG") or HERE / "Configs" / "config.toml")
    if cfg_path.exists():
        with open(cfg_path, "rb") as f:
            return tomllib.load(f)
    return {}


_CFG = _load_cfg()

# ========= CHART =========
DEFAULT_RADIUS = float(_CFG.get("chart", {}).get("radius", 150))
DEFAULT_LEGEND_POSITION = str(_CFG.get("chart", {}).get("legend_position", "right"))
GUTTER = float(_CFG.get("chart", {}).get("gutter", 40))
BACKGROUND = str(_CFG.get("chart", {}).get("background", "white"))

# ========= FONTS =========
FONT_FAMILY = _CFG.get("fonts", {}).get("family", "Arial, Helvetica, sans-serif")
TITLE_FONT_SIZE = float(_CFG.get("fonts", {}).get("title_size", 18))
LABEL_FONT_SIZE = float(_CFG.get("fonts", {}).get("label_size", 12))
LEGEND_FONT_SIZE = float(_CFG.get("fonts", {}).get("legend_size", 13))

# ========= COLORS =========
START_HUE = float(_CFG.get("colors", {}).get("start_hue", 0.55))
SATURATION = float(_CFG.get("colors", {}).get("saturation", 0.55))
LIGHTNESS = float(_CFG.get("colors", {}).get("lightness", 0.55))
SINGLE_COLOR = str(_CFG.get("colors", {}).get("single", "#41b8d5"))
WHEEL_CAPACITY = max(1, int(_CFG.get("colors", {}).get("capacity", 24)))

# ========= LABELS / LEGEND =========
SHOW_LABELS = bool(_CFG.get("labels", {}).get("show", True))
LABEL_OFFSET = float(_CFG.get("labels", {}).get("offset", 14))
LEGEND_ROW_HEIGHT = float(_CFG.get("legend", {}).get("row_height", 24))
LEGEND_SWATCH = float(_CFG.get("legend", {}).get("swatch", 16))
LEGEND_CORNER_RADIUS = float(_CFG.get("legend", {}).get("corner_radius", 3))

LEGEND_POSITIONS = ("right", "bottom")
