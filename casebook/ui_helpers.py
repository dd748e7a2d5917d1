from __future__ import annotations

from typing import List

import streamlit as st

from casebook.config import Settings, load_settings
from casebook.image_loader import fetch_image
from casebook.log_setup import setup_logging
from casebook.models import IncidentRecord
from casebook.storage import DatasetError, StatsDataset, load_cases, load_stats


@st.cache_resource(show_spinner=False)
def app_settings() -> Settings:
    settings = load_settings()
    setup_logging(settings.log_level, json_logs=settings.json_logs)
    return settings


@st.cache_data(show_spinner=False, ttl=300)
def load_cases_cached() -> List[IncidentRecord]:
    return load_cases(app_settings().cases_path)


@st.cache_data(show_spinner=False, ttl=300)
def load_stats_cached() -> StatsDataset:
    return load_stats(app_settings().stats_path)


@st.cache_data(show_spinner=False, max_entries=256)
def fetch_image_cached(url: str) -> bytes:
    settings = app_settings()
    return fetch_image(url, settings.asset_dir, timeout=settings.image_timeout)


def load_or_stop(loader):
    """Run a dataset loader; on DatasetError show it and halt the page."""
    try:
        return loader()
    except DatasetError as e:
        st.error(str(e))
        st.stop()
