import streamlit as st

from casebook import ui
from casebook.charts import airport_donut_chart, yearly_trend_chart
from casebook.stats import build_dashboard, goals_frame
from casebook.ui_helpers import app_settings, load_or_stop, load_stats_cached

st.set_page_config(page_title="통계", layout="centered")
app_settings()
ui.init_page()

ui.render_page_header("지상안전 통계", subtitle="연도별 추이, 공항별 분포, 주요 원인")

data = load_or_stop(load_stats_cached)

_DONUT_W, _DONUT_H = 320, 220
view = build_dashboard(data.yearly, data.airports, data.goals, cx=_DONUT_W / 2, cy=_DONUT_H / 2)

# ── 1. Main accident types and causes ─────────────────────────────────────
with ui.card("사고 주요 유형 및 원인 분석"):
    if data.accident_types:
        st.markdown("**주요 사고 유형**")
        for item in data.accident_types:
            st.markdown(f"**{item.get('title', '')}**")
            if item.get("description"):
                st.caption(str(item["description"]))
    if data.key_causes:
        st.markdown("**핵심 원인**")
        cols = st.columns(len(data.key_causes))
        for col, cause in zip(cols, data.key_causes):
            with col:
                ui.kpi_card("원인", cause)

# ── 2. Yearly trend + trailing window ─────────────────────────────────────
with ui.card("지상안전사고 발생 현황"):
    if view.yearly:
        st.altair_chart(yearly_trend_chart(view.yearly), use_container_width=True)
        st.markdown(f"**최근 {len(view.recent)}개년 사고 추이**")
        cols = st.columns(max(len(view.recent), 1))
        for col, summary in zip(cols, view.recent):
            with col:
                ui.kpi_card(f"{summary.year}년", summary.accidents_text, caption=summary.rate_text)
    else:
        st.caption("연도별 통계가 없습니다.")

# ── 3. Airport distribution ───────────────────────────────────────────────
with ui.card("공항별 사고 분포"):
    if view.slices:
        st.altair_chart(airport_donut_chart(view, width=_DONUT_W, height=_DONUT_H), use_container_width=False)
        ui.kpi_card("전체 건수", f"{view.total_count}건")
    else:
        st.caption("공항별 통계가 없습니다.")

# ── 4. Safety goals ───────────────────────────────────────────────────────
if view.goals:
    with ui.card("안전목표"):
        st.dataframe(goals_frame(view.goals), use_container_width=True, hide_index=True)
