from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Category(str, Enum):
    EXCELLENCE = "excellence"
    GENERAL = "general"

    @classmethod
    def parse(cls, value: Any) -> "Category":
        s = str(value or "").strip().lower()
        for member in cls:
            if member.value == s:
                return member
        raise ValueError(f"Unknown case category: {value!r}")


@dataclass(frozen=True)
class ImageRef:
    url: str
    label: Optional[str] = None


@dataclass(frozen=True)
class IncidentRecord:
    id: int
    category: Category
    title: str
    content: str
    company: str
    airport: str
    date: str
    causes: Tuple[str, ...] = ()
    countermeasures: Tuple[str, ...] = ()
    effect: Optional[str] = None
    images: Optional[Tuple[ImageRef, ...]] = None
    image_url: Optional[str] = None
    footer_images: Tuple[ImageRef, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class YearStat:
    year: str
    flights: int
    accidents: int
    rate: float


@dataclass(frozen=True)
class AirportStat:
    name: str
    count: int
    percentage: float


@dataclass(frozen=True)
class SafetyGoal:
    category: str
    sub_category: str
    target: str


# ── Raw dataset rows -> models ────────────────────────────────────────────

def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(x) for x in value)


def _image_refs(value: Any) -> Tuple[ImageRef, ...]:
    refs = []
    for item in value or []:
        if isinstance(item, str):
            refs.append(ImageRef(url=item))
        elif isinstance(item, dict) and item.get("url"):
            label = item.get("label")
            refs.append(ImageRef(url=str(item["url"]), label=str(label) if label else None))
    return tuple(refs)


def record_from_dict(row: Dict[str, Any]) -> IncidentRecord:
    """Build a record from a dataset row (keys as authored in cases.json)."""
    images = row.get("images")
    effect = row.get("effect")
    image_url = row.get("imageUrl")
    return IncidentRecord(
        id=int(row["id"]),
        category=Category.parse(row.get("type")),
        title=str(row.get("title") or ""),
        content=str(row.get("content") or ""),
        company=str(row.get("company") or ""),
        airport=str(row.get("airport") or ""),
        date=str(row.get("date") or ""),
        causes=_str_tuple(row.get("cause")),
        countermeasures=_str_tuple(row.get("countermeasure")),
        effect=str(effect) if effect else None,
        images=_image_refs(images) if images is not None else None,
        image_url=str(image_url) if image_url else None,
        footer_images=_image_refs(row.get("footerImages")),
    )


def year_stat_from_dict(row: Dict[str, Any]) -> YearStat:
    return YearStat(
        year=str(row["year"]),
        flights=int(row.get("flights") or 0),
        accidents=int(row.get("accidents") or 0),
        rate=float(row.get("rate") or 0.0),
    )


def airport_stat_from_dict(row: Dict[str, Any]) -> AirportStat:
    return AirportStat(
        name=str(row["name"]),
        count=int(row.get("count") or 0),
        percentage=float(row.get("percentage") or 0.0),
    )


def safety_goal_from_dict(row: Dict[str, Any]) -> SafetyGoal:
    return SafetyGoal(
        category=str(row.get("category") or ""),
        sub_category=str(row.get("subCategory") or ""),
        target=str(row.get("target") or ""),
    )
