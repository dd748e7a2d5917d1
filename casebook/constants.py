from __future__ import annotations

# ---------------------------------------------------------------------------
# Fixed display tokens. The dataset and the audience share one locale
# (Korean); every user-visible token lives here.
# ---------------------------------------------------------------------------
EXCELLENCE_ID_PREFIX = "우수"
GENERAL_ID_PREFIX = "사례"
# General cases are numbered from 101 in the dataset; the card shows them from 1.
GENERAL_ID_OFFSET = 100

AIRPORT_SUFFIX = "공항"
COMPANY_MAX_CHARS = 8
ELLIPSIS_MARKER = ".."

ATTACHMENT_LABEL = "첨부사진"
IMAGE_ALT_LABEL = "이미지"
IMAGE_ERROR_LINES = ("이미지를 불러올 수 없습니다.", "네트워크 환경을 확인해주세요.")

DETAIL_LABELS = {
    "excellence": "추진 배경 및 성과",
    "general": "사고 발생 경위",
}
CAUSE_SECTION_LABEL = "핵심 원인 분석"
COUNTERMEASURE_SECTION_LABEL = "재발방지 대책 및 시사점"
EFFECT_BADGE_LABEL = "Key Effect"
FIELD_REFERENCE_LABEL = "Field Reference"

CATEGORY_LABELS = {
    "excellence": "우수사례",
    "general": "사고사례",
}

# ---------------------------------------------------------------------------
# Card themes. Picked once per card from the category alone.
# ---------------------------------------------------------------------------
THEMES = {
    "excellence": {
        "border": "#D1FAE5",
        "header_bg": "rgba(236, 253, 245, 0.7)",
        "badge_bg": "#10B981",
        "header_text": "#064E3B",
        "accent": "#10B981",
        "cause_bar": "#10B981",
        "cause_num_bg": "#D1FAE5",
        "cause_num_text": "#059669",
        "measure_text": "#064E3B",
        "measure_bg": "rgba(236, 253, 245, 0.4)",
        "measure_border": "#D1FAE5",
        "measure_title": "#059669",
    },
    "general": {
        "border": "#E2E8F0",
        "header_bg": "rgba(248, 250, 252, 0.9)",
        "badge_bg": "#1E293B",
        "header_text": "#1E293B",
        "accent": "#3B82F6",
        "cause_bar": "#EF4444",
        "cause_num_bg": "#FEF2F2",
        "cause_num_text": "#EF4444",
        "measure_text": "#1E3A8A",
        "measure_bg": "rgba(239, 246, 255, 0.4)",
        "measure_border": "#DBEAFE",
        "measure_title": "#2563EB",
    },
}

# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
PIE_PALETTE = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#6366f1"]
PIE_INNER_RADIUS = 55
PIE_OUTER_RADIUS = 70
PIE_PADDING_ANGLE = 5
PIE_LABEL_OFFSET = 22
PIE_LABEL_COLOR = "#475569"
PIE_COUNT_COLOR = "#3b82f6"

TRAILING_WINDOW_SIZE = 3
RATE_DECIMALS = 3
COUNT_UNIT = "건"

SERIES_LABELS = {
    "flights": "운항횟수",
    "accidents": "발생건수",
    "rate": "환산건수",
}
SERIES_COLORS = {
    "flights": "#e2e8f0",
    "accidents": "#ef4444",
    "rate": "#f97316",
}
