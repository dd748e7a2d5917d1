from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Dict, List, Mapping, Optional, Tuple, TypeVar

from casebook.constants import (
    AIRPORT_SUFFIX,
    ATTACHMENT_LABEL,
    CAUSE_SECTION_LABEL,
    COMPANY_MAX_CHARS,
    COUNTERMEASURE_SECTION_LABEL,
    DETAIL_LABELS,
    EFFECT_BADGE_LABEL,
    ELLIPSIS_MARKER,
    EXCELLENCE_ID_PREFIX,
    FIELD_REFERENCE_LABEL,
    GENERAL_ID_OFFSET,
    GENERAL_ID_PREFIX,
    IMAGE_ALT_LABEL,
    THEMES,
)
from casebook.highlight import highlight_html
from casebook.image_state import ImageState, image_view
from casebook.models import Category, ImageRef, IncidentRecord

T = TypeVar("T")


def _by_category(mapping: Mapping[str, T], category: Category) -> T:
    try:
        return mapping[Category(category).value]
    except (KeyError, ValueError) as e:
        raise ValueError(f"No entry for category {category!r}") from e


# ── Derived display fields (pure) ─────────────────────────────────────────

def display_id(category: Category, record_id: int) -> str:
    category = Category(category)
    if category is Category.EXCELLENCE:
        return f"{EXCELLENCE_ID_PREFIX}-{record_id}"
    if category is Category.GENERAL:
        return f"{GENERAL_ID_PREFIX}-{record_id - GENERAL_ID_OFFSET}"
    raise ValueError(f"Unknown case category: {category!r}")


def display_airport(airport: str) -> str:
    return airport.replace(AIRPORT_SUFFIX, "")


def display_company(company: str) -> str:
    if len(company) > COMPANY_MAX_CHARS:
        return f"{company[:COMPANY_MAX_CHARS]}{ELLIPSIS_MARKER}"
    return company


def resolved_images(record: IncidentRecord) -> Tuple[ImageRef, ...]:
    """Inline images; the legacy single ``image_url`` only counts when ``images`` is empty."""
    if record.images:
        return tuple(record.images)
    if record.image_url:
        return (ImageRef(url=record.image_url),)
    return ()


def image_label(image: ImageRef, index: int) -> str:
    return image.label or f"{ATTACHMENT_LABEL} {index + 1}"


def image_alt(image: ImageRef, index: int) -> str:
    return image.label or f"{IMAGE_ALT_LABEL} {index + 1}"


def theme_for(category: Category) -> Dict[str, str]:
    return dict(_by_category(THEMES, category))


def detail_label(category: Category) -> str:
    return _by_category(DETAIL_LABELS, category)


# ── Card model ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CardImage:
    url: str
    label: str
    alt: str
    index: int


@dataclass(frozen=True)
class RenderedCard:
    record_id: int
    category: Category
    display_id: str
    header: str
    date: str
    theme: Dict[str, str]
    title_html: str
    content_html: str
    detail_label: str
    detail_images: Tuple[CardImage, ...]
    causes: Tuple[Tuple[int, str], ...]
    countermeasures: Tuple[str, ...]
    effect: Optional[str]
    footer_images: Tuple[CardImage, ...]

    @property
    def has_field_reference(self) -> bool:
        return bool(self.footer_images)

    @property
    def has_effect(self) -> bool:
        return self.effect is not None

    @property
    def image_urls(self) -> List[str]:
        """Distinct URLs across both image sections, first-seen order."""
        seen: Dict[str, None] = {}
        for img in self.detail_images + self.footer_images:
            seen.setdefault(img.url, None)
        return list(seen)


def _card_images(images: Tuple[ImageRef, ...]) -> Tuple[CardImage, ...]:
    return tuple(
        CardImage(url=img.url, label=image_label(img, idx), alt=image_alt(img, idx), index=idx)
        for idx, img in enumerate(images)
    )


def build_card(record: IncidentRecord, query: str = "") -> RenderedCard:
    query = query or ""
    return RenderedCard(
        record_id=record.id,
        category=record.category,
        display_id=display_id(record.category, record.id),
        header=f"{display_airport(record.airport)} · {display_company(record.company)}",
        date=record.date,
        theme=theme_for(record.category),
        title_html=highlight_html(record.title, query),
        content_html=highlight_html(record.content, query),
        detail_label=detail_label(record.category),
        detail_images=_card_images(resolved_images(record)),
        causes=tuple((i, c) for i, c in enumerate(record.causes, start=1)),
        countermeasures=tuple(record.countermeasures),
        effect=record.effect,
        footer_images=_card_images(tuple(record.footer_images)),
    )


# ── Markup ────────────────────────────────────────────────────────────────

def card_header_html(card: RenderedCard) -> str:
    t = card.theme
    return (
        f'<div class="cb-card-header" style="background:{t["header_bg"]};border-color:{t["border"]};">'
        f'<span class="cb-id-badge" style="background:{t["badge_bg"]};">{escape(card.display_id)}</span>'
        f'<span class="cb-header-text" style="color:{t["header_text"]};">{escape(card.header)}</span>'
        f'<span class="cb-date">{escape(card.date)}</span>'
        "</div>"
    )


def card_intro_html(card: RenderedCard) -> str:
    t = card.theme
    return (
        f'<h4 class="cb-title">{card.title_html}</h4>'
        f'<h5 class="cb-section-label"><span class="cb-dot" style="background:{t["accent"]};"></span>'
        f"{escape(card.detail_label)}</h5>"
        f'<p class="cb-content">{card.content_html}</p>'
    )


def causes_html(card: RenderedCard) -> str:
    t = card.theme
    parts = [
        f'<h5 class="cb-section-label"><span class="cb-bar" style="background:{t["cause_bar"]};"></span>'
        f"{escape(CAUSE_SECTION_LABEL)}</h5>",
        '<div class="cb-causes">',
    ]
    for number, text in card.causes:
        parts.append(
            '<div class="cb-cause">'
            f'<span class="cb-cause-num" style="background:{t["cause_num_bg"]};color:{t["cause_num_text"]};">{number}</span>'
            f'<span class="cb-cause-text">{escape(text)}</span>'
            "</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def countermeasures_html(card: RenderedCard) -> str:
    t = card.theme
    parts = [
        f'<h5 class="cb-section-label" style="color:{t["measure_title"]};">{escape(COUNTERMEASURE_SECTION_LABEL)}</h5>',
        f'<div class="cb-measures" style="background:{t["measure_bg"]};border-color:{t["measure_border"]};">',
        "<ul>",
    ]
    for item in card.countermeasures:
        parts.append(f'<li style="color:{t["measure_text"]};">{escape(item)}</li>')
    parts.append("</ul>")
    if card.effect is not None:
        parts.append(
            f'<div class="cb-effect" style="color:{t["measure_text"]};border-color:{t["measure_border"]};">'
            f'<span class="cb-effect-badge">{escape(EFFECT_BADGE_LABEL)}</span>'
            f"<span>{escape(card.effect)}</span>"
            "</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def field_reference_header_html() -> str:
    return f'<div class="cb-field-ref-header">{escape(FIELD_REFERENCE_LABEL)}</div>'


def image_label_html(image: CardImage) -> str:
    return f'<div class="cb-image-label">{escape(image.label)}</div>'


def image_slot_html(image: CardImage, state: ImageState) -> str:
    """Markup for a slot that is not showing the image itself.

    Empty for LOADED; the caller draws the image.
    """
    view = image_view(state)
    if view.show_fallback:
        lines = "".join(f'<p class="cb-image-error-line">{escape(line)}</p>' for line in view.fallback_lines)
        return f'<div class="cb-image-error" title="{escape(image.alt, quote=True)}"><span class="cb-image-error-icon">!</span>{lines}</div>'
    if view.show_placeholder:
        return '<div class="cb-image-pending"><span class="cb-spinner"></span></div>'
    return ""
