import json
from pathlib import Path

import pytest

from casebook.models import Category
from casebook.storage import DatasetError, load_cases, load_stats

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def test_bundled_cases_load():
    records = load_cases(DATA_DIR / "cases.json")
    assert records
    ids = [r.id for r in records]
    assert len(ids) == len(set(ids))
    assert records[0].category is Category.EXCELLENCE


def test_bundled_cases_are_complete():
    records = load_cases(DATA_DIR / "cases.json")
    assert [r.id for r in records] == [1] + list(range(101, 125))
    general = [r for r in records if r.category is Category.GENERAL]
    assert len(general) == 24
    assert all(r.footer_images for r in records if r.id >= 109)


def test_bundled_stats_load():
    data = load_stats(DATA_DIR / "stats.json")
    assert [s.year for s in data.yearly][-1] == "2024"
    assert len(data.airports) == 6
    assert data.goals
    assert data.key_causes


def test_missing_file_raises(tmp_path):
    with pytest.raises(DatasetError):
        load_cases(tmp_path / "nope.json")


def test_invalid_json_raises(tmp_path):
    p = tmp_path / "cases.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(DatasetError):
        load_cases(p)


def test_bare_list_and_non_dict_rows(tmp_path):
    p = tmp_path / "cases.json"
    rows = [
        {"id": 1, "type": "excellence", "title": "t", "content": "c", "company": "co", "airport": "a", "date": "d"},
        "garbage",
    ]
    p.write_text(json.dumps(rows, ensure_ascii=False), encoding="utf-8")
    records = load_cases(p)
    assert [r.id for r in records] == [1]


def test_stats_with_missing_sections(tmp_path):
    p = tmp_path / "stats.json"
    p.write_text(json.dumps({"yearly": [{"year": "2024", "accidents": 3, "rate": 0.1}]}), encoding="utf-8")
    data = load_stats(p)
    assert len(data.yearly) == 1
    assert data.airports == ()
    assert data.goals == ()
    assert data.key_causes == ()
