"""
Tests for the stores, the cache, the review sinks and the error log.
"""

import json

import pytest

from potstranslate.core import (
    ErrorLog,
    ErrorRecord,
    JsonFileStore,
    MemoryStore,
    ReviewSink,
    StoreStatus,
    TranslationCache,
    open_store,
)


class TestJsonFileStore:
    def test_missing_file_is_empty(self, tmp_path):
        result = JsonFileStore(tmp_path / "nope.json").load()
        assert result.data == {}
        assert result.status == StoreStatus.MISSING
        assert result.ok

    @pytest.mark.parametrize("content", [
        "{broken",
        "[\"a\", \"b\"]",
        "{\"a\": 1}",
    ])
    def test_malformed_content_is_empty(self, tmp_path, content):
        path = tmp_path / "store.json"
        path.write_text(content, encoding="utf-8")
        result = JsonFileStore(path).load()
        assert result.data == {}
        assert result.status == StoreStatus.MALFORMED
        assert not result.ok
        assert result.error

    def test_save_writes_readable_json(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileStore(path).save({"Olá": "Hello"})
        raw = path.read_text(encoding="utf-8")
        assert "Olá" in raw
        assert json.loads(raw) == {"Olá": "Hello"}

    def test_update_rereads_the_file(self, tmp_path):
        path = tmp_path / "store.json"
        store = JsonFileStore(path)
        store.save({"a": "1"})
        # Another writer changes the file between operations
        path.write_text(json.dumps({"a": "1", "b": "2"}), encoding="utf-8")

        store.update("c", "3")

        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "2", "c": "3"}


class TestOpenStore:
    def test_no_path_gives_memory_store(self):
        assert isinstance(open_store(None), MemoryStore)
        assert isinstance(open_store(""), MemoryStore)

    def test_path_gives_file_store(self, tmp_path):
        store = open_store(tmp_path / "x.json")
        assert isinstance(store, JsonFileStore)


class TestTranslationCache:
    def test_put_persists_immediately(self, tmp_path):
        path = tmp_path / "cache.json"
        cache = TranslationCache(JsonFileStore(path))
        cache.load()

        assert cache.put("Hello", "Olá")

        assert json.loads(path.read_text(encoding="utf-8")) == {"Hello": "Olá"}
        assert cache.get("Hello") == "Olá"
        assert "Hello" in cache

    def test_load_restores_previous_run(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"Yes": "Sim"}), encoding="utf-8")
        cache = TranslationCache(JsonFileStore(path))

        result = cache.load()

        assert result.status == StoreStatus.LOADED
        assert cache.get("Yes") == "Sim"
        assert len(cache) == 1

    def test_unwritable_store_keeps_entry_in_memory(self):
        class BrokenStore(MemoryStore):
            def save(self, data):
                raise OSError("disk full")

        cache = TranslationCache(BrokenStore())
        assert cache.put("Hello", "Olá") is False
        assert cache.get("Hello") == "Olá"

    def test_flush_writes_all_entries(self):
        store = MemoryStore()
        cache = TranslationCache(store)
        cache.put("a", "1")
        cache.put("b", "2")
        store.save({})

        cache.flush()

        assert store.load().data == {"a": "1", "b": "2"}


class TestReviewSink:
    def test_latest_write_wins(self):
        sink = ReviewSink(name="unchanged")
        sink.record("OK", "OK")
        sink.record("OK", "Certo")
        assert sink.records() == {"OK": "Certo"}
        assert len(sink) == 1


class TestErrorLog:
    def test_append_writes_json_lines(self, tmp_path):
        path = tmp_path / "logs" / "errors.jsonl"
        log = ErrorLog(path)
        try:
            raise ValueError("boom")
        except ValueError as e:
            log.append(ErrorRecord.from_exception("external_service", "Hi", "en", "pt", e))
        log.append(ErrorRecord("token_lookup", "Bye", "en", "pt", "TokenLookupError", "bad token"))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["kind"] == "external_service"
        assert first["error_type"] == "ValueError"
        assert "boom" in first["trace"]
        assert json.loads(lines[1])["text"] == "Bye"
        assert len(log) == 2

    def test_in_memory_only(self):
        log = ErrorLog()
        log.append(ErrorRecord("external_service", "Hi", "en", "pt", "TranslationError", "down"))
        assert log.records[0].message == "down"
