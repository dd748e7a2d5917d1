import streamlit as st

from casebook import ui
from casebook.catalog import category_counts, filter_records
from casebook.constants import CATEGORY_LABELS
from casebook.models import Category
from casebook.ui_helpers import app_settings, fetch_image_cached, load_cases_cached, load_or_stop

st.set_page_config(page_title="지상안전 사례집", layout="centered")
app_settings()
ui.init_page()

ui.render_page_header(
    "지상안전 사례집",
    subtitle="공항 지상조업 안전사고 및 우수사례",
)

# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------

records = load_or_stop(load_cases_cached)
if not records:
    st.info("등록된 사례가 없습니다.")
    st.stop()

counts = category_counts(records)
_FILTERS = {
    "all": f"전체 ({len(records)})",
    Category.EXCELLENCE.value: f"{CATEGORY_LABELS['excellence']} ({counts[Category.EXCELLENCE]})",
    Category.GENERAL.value: f"{CATEGORY_LABELS['general']} ({counts[Category.GENERAL]})",
}

# ---------------------------------------------------------------------------
# Search / filter
# ---------------------------------------------------------------------------

query = st.text_input("검색", value="", placeholder="제목, 내용, 공항, 회사명으로 검색")
choice = st.radio("구분", list(_FILTERS), format_func=_FILTERS.get, horizontal=True, label_visibility="collapsed")
category = None if choice == "all" else Category.parse(choice)

visible = filter_records(records, query=query, category=category)
trackers = ui.session_trackers(r.id for r in visible)

if not visible:
    st.warning("검색 결과가 없습니다.")
    st.stop()

st.caption(f"{len(visible)}건")

# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------

for record in visible:
    ui.render_case_card(record, query, trackers[record.id], fetch_image_cached)
