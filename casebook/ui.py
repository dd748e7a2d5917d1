from __future__ import annotations

import logging
from contextlib import contextmanager
from html import escape
from typing import Callable, Dict, Iterable, Iterator, Optional

import streamlit as st

from casebook.image_loader import ImageUnavailableError
from casebook.image_state import ImageLoadTracker, ImageState, image_view
from casebook.models import IncidentRecord
from casebook.presenter import (
    CardImage,
    build_card,
    card_header_html,
    card_intro_html,
    causes_html,
    countermeasures_html,
    field_reference_header_html,
    image_label_html,
    image_slot_html,
)

logger = logging.getLogger(__name__)

ImageFetcher = Callable[[str], bytes]

_TRACKERS_KEY = "_card_trackers"


def _inject_css() -> None:
    st.markdown(
        """
<style>
:root {
  --cb-app-bg: #F8FAFC;
  --cb-card-bg: #FFFFFF;
  --cb-text-primary: #0F172A;
  --cb-text-secondary: #64748B;
  --cb-text-muted: #94A3B8;
  --cb-border: #E2E8F0;
  --cb-accent: #2563EB;
}

.stApp {
  background: var(--cb-app-bg);
  color: var(--cb-text-primary);
}

.main .block-container {
  max-width: 860px;
  padding-top: 1rem;
  padding-bottom: 1.25rem;
}

.cb-page-title {
  margin: 0;
  font-size: 1.8rem;
  line-height: 1.2;
  font-weight: 800;
  color: var(--cb-text-primary);
}

.cb-page-subtitle {
  margin-top: 0.35rem;
  margin-bottom: 0.75rem;
  font-size: 0.9rem;
  color: var(--cb-text-secondary);
}

.cb-divider {
  border-top: 1px solid var(--cb-border);
  margin: 0.4rem 0 1rem 0;
}

.cb-card-title {
  margin: 0;
  font-size: 1.02rem;
  font-weight: 700;
  color: var(--cb-text-primary);
}

.cb-card-help {
  margin-top: 0.2rem;
  margin-bottom: 0.7rem;
  font-size: 0.85rem;
  color: var(--cb-text-secondary);
}

.cb-card-header {
  display: flex;
  align-items: center;
  gap: 0.75rem;
  padding: 0.75rem 1rem;
  border-radius: 16px;
  border: 1px solid transparent;
  margin-bottom: 1rem;
}

.cb-id-badge {
  font-size: 0.65rem;
  font-weight: 900;
  color: #FFFFFF;
  padding: 0.2rem 0.6rem;
  border-radius: 8px;
}

.cb-header-text {
  font-size: 0.95rem;
  font-weight: 700;
  flex: 1;
}

.cb-date {
  font-size: 0.75rem;
  font-weight: 700;
  color: var(--cb-text-muted);
  background: rgba(255, 255, 255, 0.7);
  padding: 0.25rem 0.6rem;
  border-radius: 999px;
  border: 1px solid rgba(226, 232, 240, 0.5);
}

.cb-title {
  font-size: 1.25rem;
  font-weight: 800;
  line-height: 1.45;
  margin: 0.25rem 0 1.5rem 0;
  word-break: keep-all;
}

.cb-mark {
  background: #FEF08A;
  color: #0F172A;
  border-radius: 2px;
  padding: 0 2px;
}

.cb-section-label {
  display: flex;
  align-items: center;
  gap: 0.5rem;
  font-size: 0.8rem;
  font-weight: 900;
  color: var(--cb-text-muted);
  letter-spacing: 0.1em;
  margin: 1.5rem 0 0.75rem 0;
}

.cb-dot { width: 0.5rem; height: 0.5rem; border-radius: 50%; display: inline-block; }
.cb-bar { width: 0.25rem; height: 1rem; border-radius: 999px; display: inline-block; }

.cb-content {
  font-size: 1rem;
  color: #475569;
  line-height: 1.8;
  text-align: justify;
  word-break: keep-all;
}

.cb-causes { display: grid; gap: 0.85rem; }

.cb-cause {
  display: flex;
  align-items: flex-start;
  gap: 1rem;
  padding: 1rem;
  border-radius: 16px;
  border: 1px solid #F1F5F9;
  background: #FFFFFF;
}

.cb-cause-num {
  width: 1.5rem;
  height: 1.5rem;
  border-radius: 8px;
  display: flex;
  align-items: center;
  justify-content: center;
  font-size: 0.75rem;
  font-weight: 900;
  flex-shrink: 0;
}

.cb-cause-text { font-size: 0.95rem; font-weight: 600; color: #334155; }

.cb-measures {
  padding: 1.5rem;
  border-radius: 28px;
  border: 2px solid transparent;
}

.cb-measures li { font-size: 0.95rem; font-weight: 700; line-height: 1.6; margin-bottom: 0.75rem; }

.cb-effect {
  display: flex;
  align-items: center;
  gap: 0.75rem;
  margin-top: 1.5rem;
  padding-top: 1.25rem;
  border-top: 1px solid transparent;
  font-size: 0.8rem;
  font-weight: 800;
}

.cb-effect-badge {
  padding: 0.25rem 0.6rem;
  background: #FFFFFF;
  border-radius: 8px;
  border: 2px solid currentColor;
  font-size: 0.7rem;
  text-transform: uppercase;
}

.cb-field-ref-header {
  font-size: 0.8rem;
  font-weight: 900;
  color: var(--cb-text-secondary);
  text-transform: uppercase;
  margin: 2rem 0 0.5rem 0.25rem;
}

.cb-image-label {
  font-size: 0.75rem;
  font-weight: 800;
  color: var(--cb-text-secondary);
  margin: 1rem 0 0.4rem 0.25rem;
}

.cb-image-pending,
.cb-image-error {
  min-height: 160px;
  border-radius: 20px;
  border: 1px solid #F1F5F9;
  background: #F8FAFC;
  display: flex;
  flex-direction: column;
  align-items: center;
  justify-content: center;
  gap: 0.3rem;
  text-align: center;
}

.cb-spinner {
  width: 1.5rem;
  height: 1.5rem;
  border: 3px solid #E2E8F0;
  border-top-color: #CBD5E1;
  border-radius: 50%;
  animation: cb-spin 0.9s linear infinite;
}

@keyframes cb-spin { to { transform: rotate(360deg); } }

.cb-image-error-icon {
  width: 2.5rem;
  height: 2.5rem;
  border-radius: 50%;
  border: 3px solid #E2E8F0;
  color: #E2E8F0;
  font-weight: 900;
  display: flex;
  align-items: center;
  justify-content: center;
  margin-bottom: 0.5rem;
}

.cb-image-error-line { margin: 0; font-size: 0.75rem; font-weight: 700; color: var(--cb-text-muted); }
.cb-image-error-line + .cb-image-error-line { font-size: 0.65rem; color: #CBD5E1; }

.cb-kpi-card {
  border: 1px solid #e2e8f0;
  border-radius: 16px;
  background: #F8FAFC;
  padding: 0.85rem;
  text-align: center;
  margin-bottom: 0.6rem;
}

.cb-kpi-label { font-size: 0.75rem; color: var(--cb-text-muted); font-weight: 700; margin-bottom: 0.2rem; }
.cb-kpi-value { font-size: 1.1rem; font-weight: 900; color: #1e293b; line-height: 1; }
.cb-kpi-caption { font-size: 0.65rem; color: #F97316; font-weight: 700; margin-top: 0.4rem; }
</style>
        """,
        unsafe_allow_html=True,
    )


def render_page_header(title: str, subtitle: Optional[str] = None) -> None:
    st.markdown(f'<h1 class="cb-page-title">{escape(title)}</h1>', unsafe_allow_html=True)
    if subtitle:
        st.markdown(f'<div class="cb-page-subtitle">{escape(subtitle)}</div>', unsafe_allow_html=True)
    st.markdown('<div class="cb-divider"></div>', unsafe_allow_html=True)


def _render_sidebar_nav() -> None:
    with st.sidebar:
        st.markdown("### 지상안전 사례집")
        st.caption("Ground safety casebook")
        st.divider()
        st.page_link("Home.py", label="사례")
        st.page_link("pages/01_Statistics.py", label="통계")


def init_page() -> None:
    _inject_css()
    _render_sidebar_nav()


@contextmanager
def card(title: Optional[str] = None, help_text: Optional[str] = None) -> Iterator[None]:
    with st.container(border=True):
        if title:
            st.markdown(f'<div class="cb-card-title">{escape(title)}</div>', unsafe_allow_html=True)
        if help_text:
            st.markdown(f'<div class="cb-card-help">{escape(help_text)}</div>', unsafe_allow_html=True)
        yield


def kpi_card(label: str, value: object, caption: Optional[str] = None) -> None:
    parts = [
        '<div class="cb-kpi-card">',
        f'<div class="cb-kpi-label">{escape(str(label))}</div>',
        f'<div class="cb-kpi-value">{escape(str(value))}</div>',
    ]
    if caption:
        parts.append(f'<div class="cb-kpi-caption">{escape(str(caption))}</div>')
    parts.append("</div>")
    st.markdown("".join(parts), unsafe_allow_html=True)


# ── Card image state lifetime ─────────────────────────────────────────────

def sync_trackers(store: Dict[int, ImageLoadTracker], visible_ids: Iterable[int]) -> Dict[int, ImageLoadTracker]:
    """Keep one tracker per visible card; discard trackers of cards that left the view."""
    visible = set(visible_ids)
    for rid in list(store):
        if rid not in visible:
            store.pop(rid).discard()
    for rid in visible:
        if rid not in store:
            store[rid] = ImageLoadTracker(owner=str(rid))
    return store


def session_trackers(visible_ids: Iterable[int]) -> Dict[int, ImageLoadTracker]:
    store = st.session_state.setdefault(_TRACKERS_KEY, {})
    return sync_trackers(store, visible_ids)


# ── Case card ─────────────────────────────────────────────────────────────

def load_into_tracker(url: str, tracker: ImageLoadTracker, fetch: ImageFetcher) -> Optional[bytes]:
    """Fetch one image and feed the outcome to the tracker as a signal."""
    tracker.observe(url)
    try:
        data = fetch(url)
    except ImageUnavailableError as e:
        logger.warning("image unavailable: %s", e, extra={"card": tracker.owner, "url": url})
        tracker.mark_errored(url)
        return None
    tracker.mark_loaded(url)
    return data


def _render_image(image: CardImage, tracker: ImageLoadTracker, fetch: ImageFetcher) -> None:
    st.markdown(image_label_html(image), unsafe_allow_html=True)
    slot = st.empty()
    state = tracker.observe(image.url)
    if state is ImageState.ERRORED:
        slot.markdown(image_slot_html(image, state), unsafe_allow_html=True)
        return
    slot.markdown(image_slot_html(image, ImageState.PENDING), unsafe_allow_html=True)
    # The fetch is issued per rendered element; the tracker only records one outcome per URL.
    data = load_into_tracker(image.url, tracker, fetch)
    state = tracker.state(image.url)
    if image_view(state).show_image and data is not None:
        slot.image(data, caption=None, use_container_width=True)
    else:
        html = image_slot_html(image, state) or image_slot_html(image, ImageState.ERRORED)
        slot.markdown(html, unsafe_allow_html=True)


def render_case_card(record: IncidentRecord, query: str, tracker: ImageLoadTracker, fetch: ImageFetcher) -> None:
    c = build_card(record, query)
    for url in c.image_urls:
        tracker.observe(url)
    with st.container(border=True):
        st.markdown(card_header_html(c), unsafe_allow_html=True)
        st.markdown(card_intro_html(c), unsafe_allow_html=True)
        for image in c.detail_images:
            _render_image(image, tracker, fetch)
        st.markdown(causes_html(c), unsafe_allow_html=True)
        st.markdown(countermeasures_html(c), unsafe_allow_html=True)
        if c.has_field_reference:
            st.markdown(field_reference_header_html(), unsafe_allow_html=True)
            for image in c.footer_images:
                _render_image(image, tracker, fetch)
