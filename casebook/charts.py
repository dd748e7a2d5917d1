from __future__ import annotations

from typing import Sequence

import altair as alt

from casebook.constants import (
    PIE_COUNT_COLOR,
    PIE_INNER_RADIUS,
    PIE_LABEL_COLOR,
    PIE_OUTER_RADIUS,
    SERIES_COLORS,
    SERIES_LABELS,
)
from casebook.models import YearStat
from casebook.stats import DashboardView, airport_frame, yearly_frame, yearly_long_frame


def yearly_trend_chart(yearly: Sequence[YearStat], height: int = 300) -> alt.LayerChart:
    """Flights as bars (left axis), accidents and rate as lines (right axis)."""
    df = yearly_frame(yearly)
    long = yearly_long_frame(yearly)
    x = alt.X("year:O", title=None, axis=alt.Axis(labelAngle=0, labelFontWeight="bold"))

    bars = (
        alt.Chart(df)
        .mark_bar(color=SERIES_COLORS["flights"], size=32, cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=x,
            y=alt.Y("flights:Q", axis=None, title=SERIES_LABELS["flights"]),
            tooltip=[alt.Tooltip("year:O"), alt.Tooltip("flights:Q", title=SERIES_LABELS["flights"], format=",")],
        )
    )

    color = alt.Color(
        "series_label:N",
        scale=alt.Scale(
            domain=[SERIES_LABELS["accidents"], SERIES_LABELS["rate"]],
            range=[SERIES_COLORS["accidents"], SERIES_COLORS["rate"]],
        ),
        legend=alt.Legend(title=None, orient="top-right"),
    )
    lines = (
        alt.Chart(long)
        .mark_line(point=True, strokeWidth=2)
        .encode(
            x=x,
            y=alt.Y("value:Q", axis=None),
            color=color,
            tooltip=[alt.Tooltip("year:O"), alt.Tooltip("series_label:N", title=None), alt.Tooltip("value:Q")],
        )
    )
    accident_labels = (
        alt.Chart(long)
        .transform_filter(alt.datum.series == "accidents")
        .mark_text(dy=-12, color=SERIES_COLORS["accidents"], fontSize=13, fontWeight="bold")
        .encode(x=x, y=alt.Y("value:Q", axis=None), text="value:Q")
    )

    right_axis = alt.layer(lines, accident_labels)
    return alt.layer(bars, right_axis).resolve_scale(y="independent").properties(height=height)


def airport_donut_chart(view: DashboardView, width: int = 320, height: int = 220) -> alt.LayerChart:
    """Donut from pre-computed slice angles, labels at pre-computed anchors.

    ``view`` must have been built with ``cx=width/2, cy=height/2`` so the
    pixel-space labels line up with the ring.
    """
    df = airport_frame(view)
    base = alt.Chart(df)

    ring = base.mark_arc(innerRadius=PIE_INNER_RADIUS, outerRadius=PIE_OUTER_RADIUS, stroke=None).encode(
        theta=alt.Theta("theta:Q", scale=None),
        theta2="theta2:Q",
        color=alt.Color("color:N", scale=None),
        tooltip=["name:N", "count:Q", "percentage:Q"],
    )

    layers = [ring]
    for anchor, align in (("start", "left"), ("end", "right")):
        side = base.transform_filter(alt.datum.anchor == anchor)
        pos = {"x": alt.X("label_x:Q", scale=None), "y": alt.Y("label_y:Q", scale=None)}
        layers.append(
            side.mark_text(align=align, baseline="middle", dy=-6, fontSize=11, fontWeight="bold", color=PIE_LABEL_COLOR)
            .encode(text="line1:N", **pos)
        )
        layers.append(
            side.mark_text(align=align, baseline="middle", dy=8, fontSize=10, fontWeight="bold", color=PIE_COUNT_COLOR)
            .encode(text="line2:N", **pos)
        )

    return alt.layer(*layers).properties(width=width, height=height).configure_view(strokeWidth=0)
