from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TypeVar

import pandas as pd

from casebook.constants import (
    COUNT_UNIT,
    PIE_LABEL_OFFSET,
    PIE_OUTER_RADIUS,
    PIE_PADDING_ANGLE,
    PIE_PALETTE,
    RATE_DECIMALS,
    SERIES_LABELS,
    TRAILING_WINDOW_SIZE,
)
from casebook.models import AirportStat, SafetyGoal, YearStat

T = TypeVar("T")

RADIAN = math.pi / 180


# ── Pure helpers (unit-testable) ──────────────────────────────────────────

def trailing_window(series: Sequence[T], size: int = TRAILING_WINDOW_SIZE) -> List[T]:
    """Last ``size`` entries in original order; shorter series come back whole."""
    if size <= 0:
        return []
    return list(series[-size:])


def format_rate(rate: float) -> str:
    return f"{rate:.{RATE_DECIMALS}f}"


def format_number(value: float) -> str:
    """45.0 -> '45', 4.5 -> '4.5'. Values are printed as supplied, never rounded."""
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return str(v)


def format_count(count: int) -> str:
    return f"{count}{COUNT_UNIT}"


def slice_color(index: int) -> str:
    return PIE_PALETTE[index % len(PIE_PALETTE)]


@dataclass(frozen=True)
class SliceAngles:
    start: float
    end: float

    @property
    def mid(self) -> float:
        return (self.start + self.end) / 2


def slice_angles(
    values: Sequence[float],
    start_angle: float = 0.0,
    end_angle: float = 360.0,
    padding_angle: float = PIE_PADDING_ANGLE,
) -> List[SliceAngles]:
    """Lay slices out counter-clockwise from 3 o'clock (degrees).

    A padding gap follows every non-zero slice on a full circle (one fewer on
    a partial arc); zero-valued slices take no room.
    """
    sweep = end_angle - start_angle
    sign = 1 if sweep >= 0 else -1
    total = sum(v for v in values if v > 0)
    non_zero = sum(1 for v in values if v > 0)
    gaps = non_zero if abs(sweep) >= 360 else max(non_zero - 1, 0)
    usable = abs(sweep) - gaps * padding_angle

    out: List[SliceAngles] = []
    prev_end: Optional[float] = None
    for v in values:
        value = max(float(v), 0.0)
        share = value / total if total else 0.0
        if prev_end is None:
            s = start_angle
        else:
            s = prev_end + sign * padding_angle * (1 if value > 0 else 0)
        e = s + sign * share * usable
        out.append(SliceAngles(start=s, end=e))
        prev_end = e
    return out


@dataclass(frozen=True)
class LabelPlacement:
    x: float
    y: float
    anchor: str  # "start" | "end"


def label_position(cx: float, cy: float, outer_radius: float, mid_angle: float) -> LabelPlacement:
    """Anchor point for a slice label, just outside the ring.

    ``mid_angle`` is in degrees, counter-clockwise from 3 o'clock, in screen
    coordinates (y grows downward). Labels right of centre are start-aligned.
    """
    radius = outer_radius + PIE_LABEL_OFFSET
    x = cx + radius * math.cos(-mid_angle * RADIAN)
    y = cy + radius * math.sin(-mid_angle * RADIAN)
    return LabelPlacement(x=x, y=y, anchor="start" if x > cx else "end")


def label_lines(stat: AirportStat) -> Tuple[str, str]:
    return stat.name, f"{stat.count}{COUNT_UNIT}({format_number(stat.percentage)}%)"


# ── Dashboard view ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class YearSummary:
    year: str
    accidents_text: str
    rate_text: str


@dataclass(frozen=True)
class AirportSlice:
    stat: AirportStat
    color: str
    angles: SliceAngles
    label: LabelPlacement
    lines: Tuple[str, str]


@dataclass(frozen=True)
class DashboardView:
    yearly: Tuple[YearStat, ...]
    recent: Tuple[YearSummary, ...]
    slices: Tuple[AirportSlice, ...]
    total_count: int
    goals: Tuple[SafetyGoal, ...] = ()


def summarize_year(stat: YearStat) -> YearSummary:
    return YearSummary(year=stat.year, accidents_text=format_count(stat.accidents), rate_text=format_rate(stat.rate))


def build_slices(
    airports: Sequence[AirportStat],
    cx: float,
    cy: float,
    outer_radius: float = PIE_OUTER_RADIUS,
    padding_angle: float = PIE_PADDING_ANGLE,
) -> List[AirportSlice]:
    angles = slice_angles([a.count for a in airports], padding_angle=padding_angle)
    return [
        AirportSlice(
            stat=stat,
            color=slice_color(idx),
            angles=ang,
            label=label_position(cx, cy, outer_radius, ang.mid),
            lines=label_lines(stat),
        )
        for idx, (stat, ang) in enumerate(zip(airports, angles))
    ]


def build_dashboard(
    yearly: Sequence[YearStat],
    airports: Sequence[AirportStat],
    goals: Sequence[SafetyGoal] = (),
    cx: float = 160.0,
    cy: float = 110.0,
    outer_radius: float = PIE_OUTER_RADIUS,
) -> DashboardView:
    return DashboardView(
        yearly=tuple(yearly),
        recent=tuple(summarize_year(s) for s in trailing_window(list(yearly))),
        slices=tuple(build_slices(airports, cx, cy, outer_radius)),
        total_count=sum(a.count for a in airports),
        goals=tuple(goals),
    )


# ── Frames for charts and tables ──────────────────────────────────────────

def yearly_frame(yearly: Sequence[YearStat]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "year": [s.year for s in yearly],
            "flights": [s.flights for s in yearly],
            "accidents": [s.accidents for s in yearly],
            "rate": [s.rate for s in yearly],
        },
        columns=["year", "flights", "accidents", "rate"],
    )


def yearly_long_frame(yearly: Sequence[YearStat]) -> pd.DataFrame:
    """Accidents and rate stacked long-form for a shared right-axis line layer."""
    df = yearly_frame(yearly)
    long = df.melt(id_vars=["year"], value_vars=["accidents", "rate"], var_name="series", value_name="value")
    long["series_label"] = long["series"].map(SERIES_LABELS)
    return long


def airport_frame(view: DashboardView) -> pd.DataFrame:
    rows = []
    for sl in view.slices:
        rows.append(
            {
                "name": sl.stat.name,
                "count": sl.stat.count,
                "percentage": sl.stat.percentage,
                "color": sl.color,
                # Vega arcs run clockwise from 12 o'clock in radians.
                "theta": (90 - sl.angles.start) * RADIAN,
                "theta2": (90 - sl.angles.end) * RADIAN,
                "label_x": sl.label.x,
                "label_y": sl.label.y,
                "anchor": sl.label.anchor,
                "line1": sl.lines[0],
                "line2": sl.lines[1],
            }
        )
    cols = ["name", "count", "percentage", "color", "theta", "theta2", "label_x", "label_y", "anchor", "line1", "line2"]
    return pd.DataFrame(rows, columns=cols)


def goals_frame(goals: Sequence[SafetyGoal]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"구분": g.category, "세부 항목": g.sub_category, "목표": g.target} for g in goals],
        columns=["구분", "세부 항목", "목표"],
    )
