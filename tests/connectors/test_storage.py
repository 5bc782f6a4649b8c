import json
from unittest.mock import patch

import pytest

from connectors.storage import InMemoryStorage, JsonFileStorage
from models.errors import PersistenceFailure


def test_in_memory_storage_get_set():
    storage = InMemoryStorage({"a": "1"})
    assert storage.get_item("a") == "1"
    storage.set_item("b", "2")
    assert storage.get_item("b") == "2"
    assert storage.get_item("missing") is None


def test_in_memory_storage_copies_initial_dict():
    initial = {"a": "1"}
    storage = InMemoryStorage(initial)
    storage.set_item("a", "2")
    assert initial["a"] == "1"


def test_json_file_storage_missing_file_reads_none(tmp_path):
    storage = JsonFileStorage(tmp_path / "storage.json")
    assert storage.get_item("products") is None


def test_json_file_storage_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    JsonFileStorage(path).set_item("products", '[{"id": "1"}]')
    JsonFileStorage(path).set_item("other", "x")

    reopened = JsonFileStorage(path)
    assert reopened.get_item("products") == '[{"id": "1"}]'
    assert json.loads(path.read_text(encoding="utf-8")) == {"products": '[{"id": "1"}]', "other": "x"}


def test_json_file_storage_leaves_no_temp_files(tmp_path):
    storage = JsonFileStorage(tmp_path / "storage.json")
    storage.set_item("k", "v")
    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


def test_json_file_storage_corrupt_file_raises(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(PersistenceFailure, match="Cannot read storage file"):
        JsonFileStorage(path).get_item("k")


def test_json_file_storage_non_object_raises(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(PersistenceFailure, match="does not hold a JSON object"):
        JsonFileStorage(path).get_item("k")


def test_json_file_storage_non_string_value_reads_none(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text('{"k": 5}', encoding="utf-8")
    assert JsonFileStorage(path).get_item("k") is None


def test_json_file_storage_write_error_raises(tmp_path):
    storage = JsonFileStorage(tmp_path / "storage.json")
    with patch("connectors.storage.os.replace", side_effect=OSError("read-only")):
        with pytest.raises(PersistenceFailure, match="Cannot write storage file"):
            storage.set_item("k", "v")
