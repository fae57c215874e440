# tests/test_importer.py
import json

import pytest

from math_calendar.db import init_db
from math_calendar.errors import ValidationError
from math_calendar.importer import (
    CONTENT_PACK_KEY, import_content, import_file, load_saved_pack, read_content_file,
)
from math_calendar.progress import get_setting

PACK = {
    "months": [{"id": 1, "name": "January", "mathematician": "Emmy Noether", "theme": "Symmetry"}],
    "data": {"1": [{"t": "Shapes", "q": "How many sides has a square?", "choices": ["3", "4"], "a": "4"}]},
}

YAML_PACK = """
data:
  2:
    - topic: Doubling
      question: What is double 6?
      choices: ["10", "12", "14"]
      answer: "12"
"""


def test_read_json_file(tmp_path):
    f = tmp_path / "pack.json"
    f.write_text(json.dumps(PACK))
    assert read_content_file(str(f))["months"][0]["name"] == "January"


def test_read_yaml_file(tmp_path):
    f = tmp_path / "pack.yml"
    f.write_text(YAML_PACK)
    data = read_content_file(str(f))
    assert data["data"][2][0]["answer"] == "12"


def test_read_unsupported_file(tmp_path):
    f = tmp_path / "notes.txt"
    f.write_text("hello")
    with pytest.raises(ValidationError):
        read_content_file(str(f))


def test_read_non_mapping(tmp_path):
    f = tmp_path / "list.json"
    f.write_text("[1, 2]")
    with pytest.raises(ValidationError):
        read_content_file(str(f))


def test_import_content_json(tmp_path, bundled):
    f = tmp_path / "pack.json"
    f.write_text(json.dumps(PACK))
    store = import_content(str(f), bundled)
    assert store.get_month(1).mathematician == "Emmy Noether"
    assert len(store.days_in(1)) == 1
    assert store.get_day(1, 1).answer == "4"
    assert len(store.days_in(2)) == 28


def test_import_content_yaml(tmp_path, bundled):
    f = tmp_path / "pack.yaml"
    f.write_text(YAML_PACK)
    store = import_content(str(f), bundled)
    assert len(store.days_in(2)) == 1
    assert len(store.months) == 12


def test_import_content_invalid_record(tmp_path, bundled):
    bad = {"data": {"3": [{"topic": "x", "question": "y", "choices": ["1", "2"], "answer": "9"}]}}
    f = tmp_path / "bad.json"
    f.write_text(json.dumps(bad))
    with pytest.raises(ValidationError, match="month 3 day 1"):
        import_content(str(f), bundled)


def test_import_content_broken_json(tmp_path, bundled):
    f = tmp_path / "broken.json"
    f.write_text("{oops")
    with pytest.raises(ValidationError):
        import_content(str(f), bundled)


def test_import_content_broken_yaml(tmp_path, bundled):
    f = tmp_path / "broken.yaml"
    f.write_text("data: [unclosed")
    with pytest.raises(ValidationError):
        import_content(str(f), bundled)


def test_import_file_remembers_pack(tmp_path, tmp_db, bundled):
    init_db(tmp_db)
    f = tmp_path / "pack.json"
    f.write_text(json.dumps(PACK))
    result = import_file(tmp_db, str(f), bundled)
    assert result["filename"] == "pack.json"
    assert result["questions"] == 1 + 365 - 31
    assert get_setting(tmp_db, CONTENT_PACK_KEY) == str(f.resolve())
    reloaded = load_saved_pack(tmp_db, bundled)
    assert reloaded.get_month(1).mathematician == "Emmy Noether"


def test_load_saved_pack_without_import(tmp_db, bundled):
    init_db(tmp_db)
    assert load_saved_pack(tmp_db, bundled) is bundled


def test_load_saved_pack_missing_file(tmp_path, tmp_db, bundled):
    init_db(tmp_db)
    f = tmp_path / "pack.json"
    f.write_text(json.dumps(PACK))
    import_file(tmp_db, str(f), bundled)
    f.unlink()
    assert load_saved_pack(tmp_db, bundled) is bundled
