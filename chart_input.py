# chart_input.py
# Read the chart description (TOML, or a CSV/Excel table) into a ChartInput.
# TOML is the lenient input format: comments, bare keys and trailing commas in arrays.

from __future__ import annotations

import dataclasses
import logging
import math
import re
import tomllib  # stdlib (3.11+)
import warnings
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd
from svgwrite.data.typechecker import Full11TypeChecker

from pie_config import DEFAULT_LEGEND_POSITION, DEFAULT_RADIUS, LEGEND_POSITIONS
from pie_errors import EmptyInputError, InvalidValueError, ParseError, UnknownOptionWarning

logger = logging.getLogger(__name__)

# key in the input -> attribute name
OPTION_KEYS = {
    "title": "title",
    "unit": "unit",
    "radius": "radius",
    "legendPosition": "legend_position",
    "legend_position": "legend_position",
}
SLICE_LIST_KEYS = ("slices", "items")
SLICE_KEYS = {"label", "key", "value", "color"}

_TYPES = Full11TypeChecker()
_AT_LINE = re.compile(r"at line (\d+), column (\d+)")


# =======================
# Data model
# =======================
@dataclass(frozen=True)
class Slice:
    label: str
    value: float
    color: Optional[str] = None


@dataclass(frozen=True)
class ChartOptions:
    unit: Optional[str] = None
    radius: float = DEFAULT_RADIUS
    legend_position: str = DEFAULT_LEGEND_POSITION


@dataclass(frozen=True)
class ChartInput:
    slices: Tuple[Slice, ...]
    title: Optional[str] = None
    options: ChartOptions = field(default_factory=ChartOptions)

    @property
    def values(self) -> List[float]:
        return [s.value for s in self.slices]

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self.slices]


# =======================
# Validation helpers
# =======================
def _check_value(label: str, raw: Any, where: str) -> float:
    # bool is an int subclass; true/false are not amounts
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InvalidValueError(label, raw, "not a number", field=where)
    value = float(raw)
    if not math.isfinite(value):
        raise InvalidValueError(label, raw, "not a finite number", field=where)
    if value <= 0:
        raise InvalidValueError(label, raw, "must be greater than zero", field=where)
    return value


def _check_color(raw: Any, where: str) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw.strip() or not _TYPES.is_color(raw.strip()):
        raise ParseError(f"unsupported color {raw!r}, use a hex color or a CSS color name", field=where)
    return raw.strip()


def make_slice(record: Dict[str, Any], index: int) -> Slice:
    """Validate one input record and turn it into a Slice."""
    where = f"slices[{index}]"
    if not isinstance(record, dict):
        raise ParseError("each slice must be a table like { label = ..., value = ... }", field=where)

    label = record.get("label", record.get("key"))
    if not isinstance(label, str):
        raise ParseError("slice label must be a string", field=f"{where}.label")
    if "value" not in record:
        raise InvalidValueError(label, None, "missing value", field=f"{where}.value")

    value = _check_value(label, record["value"], f"{where}.value")
    color = _check_color(record.get("color"), f"{where}.color")

    extra = set(record) - SLICE_KEYS
    for key in sorted(extra):
        warnings.warn(f"ignoring unknown key '{key}' in {where}", UnknownOptionWarning, stacklevel=3)

    return Slice(label=label, value=value, color=color)


def make_options(raw: Dict[str, Any]) -> ChartOptions:
    """Validate the recognized top-level options (title excluded)."""
    kwargs: Dict[str, Any] = {}

    unit = raw.get("unit")
    if unit is not None:
        if not isinstance(unit, str):
            raise ParseError("unit must be a string", field="unit")
        kwargs["unit"] = unit

    radius = raw.get("radius")
    if radius is not None:
        if isinstance(radius, bool) or not isinstance(radius, (int, float)) \
                or not math.isfinite(radius) or radius <= 0:
            raise ParseError(f"radius must be a positive number, got {radius!r}", field="radius")
        kwargs["radius"] = float(radius)

    position = raw.get("legend_position")
    if position is not None:
        if not isinstance(position, str) or position.strip().lower() not in LEGEND_POSITIONS:
            raise ParseError(
                f"legendPosition must be one of {', '.join(LEGEND_POSITIONS)}, got {position!r}",
                field="legendPosition",
            )
        kwargs["legend_position"] = position.strip().lower()

    return ChartOptions(**kwargs)


def build_chart(title: Optional[str], records: Iterable[Dict[str, Any]], options: Dict[str, Any]) -> ChartInput:
    slices = tuple(make_slice(rec, i) for i, rec in enumerate(records))
    if not slices:
        raise EmptyInputError(field="slices")
    if title is not None and not isinstance(title, str):
        raise ParseError("title must be a string", field="title")
    chart = ChartInput(slices=slices, title=title, options=make_options(options))
    logger.debug("parsed %d slice(s), title=%r, options=%s", len(slices), title, chart.options)
    return chart


def apply_overrides(chart: ChartInput, title: Optional[str] = None, **options: Any) -> ChartInput:
    """
    Return a copy of ``chart`` with the given title/options replaced.

    ``None`` leaves a setting alone; new values go through the same checks as the file.
    """
    given = {OPTION_KEYS.get(k, k): v for k, v in options.items() if v is not None}
    if title is None and not given:
        return chart
    if title is not None and not isinstance(title, str):
        raise ParseError("title must be a string", field="title")
    merged = dataclasses.asdict(chart.options)
    merged.update(given)
    return dataclasses.replace(
        chart,
        title=chart.title if title is None else title,
        options=make_options(merged),
    )


# =======================
# Entry points
# =======================
def parse_chart(text: str) -> ChartInput:
    """
    Parse the TOML chart description.

    Top level: ``title``, ``unit``, ``radius``, ``legendPosition`` and ``slices``
    (a list of ``{ label, value, color }`` tables). ``items``/``key`` are read as
    aliases of ``slices``/``label``. Unknown top-level keys are ignored with an
    UnknownOptionWarning.
    """
    try:
        doc = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        line, column = getattr(exc, "lineno", None), getattr(exc, "colno", None)
        if line is None:
            m = _AT_LINE.search(str(exc))
            if m:
                line, column = int(m.group(1)), int(m.group(2))
        msg = getattr(exc, "msg", None) or _AT_LINE.sub("", str(exc)).strip(" ()")
        raise ParseError(f"malformed chart file: {msg}", line=line, column=column) from exc

    records: Any = []
    for key in SLICE_LIST_KEYS:
        if key in doc:
            records = doc[key]
            break
    if not isinstance(records, list):
        raise ParseError("slices must be a list of tables", field="slices")

    options: Dict[str, Any] = {}
    for key, value in doc.items():
        if key in SLICE_LIST_KEYS or key == "title":
            continue
        if key in OPTION_KEYS:
            options[OPTION_KEYS[key]] = value
        else:
            warnings.warn(f"ignoring unknown option '{key}'", UnknownOptionWarning, stacklevel=2)

    return build_chart(doc.get("title"), records, options)


def load_table(
    path: str | Path,
    label_col: str,
    value_col: str,
    color_col: Optional[str] = None,
    title: Optional[str] = None,
    sheet_name: str | int = 0,
    **options: Any,
) -> ChartInput:
    """
    Build a chart from a CSV or Excel sheet, one slice per row, in row order.
    Rows are not grouped, so repeated labels stay separate slices.
    """
    path = Path(path)
    try:
        if path.suffix.lower() == ".xlsx":
            df = pd.read_excel(path, sheet_name=sheet_name)
        else:
            df = pd.read_csv(path)
    except (ValueError, ImportError, zipfile.BadZipFile) as exc:
        # pandas ParserError, EmptyDataError and UnicodeDecodeError are all ValueErrors
        raise ParseError(f"unreadable table {path.name}: {exc}") from exc

    wanted = [label_col, value_col] + ([color_col] if color_col else [])
    for col in wanted:
        if col not in df.columns:
            raise ParseError(f"Column '{col}' not found. Available columns: {list(df.columns)}", field=col)

    df = df[wanted].dropna(subset=[label_col])
    records = []
    for row in df.itertuples(index=False):
        label, value = row[0], row[1]
        rec: Dict[str, Any] = {"label": str(label).strip()}
        # numpy scalars -> python numbers; NaN stays NaN and is rejected later
        rec["value"] = value.item() if hasattr(value, "item") else value
        if color_col and isinstance(row[2], str) and row[2].strip():
            rec["color"] = row[2]
        records.append(rec)

    logger.debug("read %d row(s) from %s", len(records), path)
    return build_chart(title, records, {OPTION_KEYS.get(k, k): v for k, v in options.items()})
