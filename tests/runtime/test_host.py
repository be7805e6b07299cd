from __future__ import annotations

import json
import os

from flexhours.domain.snapshot import EMPTY_SNAPSHOT
from flexhours.runtime.host import HostDocument, InMemoryDocument, JsonFileDocument

from helpers import make_page

PAGE = {
    "fragments": [
        {"tag": "button", "text": "근무중 ", "children": [{"tag": "span", "text": "2시간 30분"}]},
        {"tag": "button", "text": "31:00"},
    ]
}


def _write(path, data, mtime):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    os.utime(path, (mtime, mtime))


class TestInMemoryDocument:
    def test_conforms_to_protocol(self, document):
        assert isinstance(document, HostDocument)

    def test_render_notifies_subscribers(self, document, page):
        calls = []
        document.subscribe_to_changes(lambda: calls.append("a"))
        document.render(page)
        document.render(page, notify=False)
        document.touch()
        assert calls == ["a", "a"]
        assert document.snapshot_text() is page

    def test_unsubscribe_during_notification(self):
        document = InMemoryDocument(make_page())
        calls = []

        def first():
            calls.append("first")
            document.unsubscribe(second_handle)

        document.subscribe_to_changes(first)
        second_handle = document.subscribe_to_changes(lambda: calls.append("second"))
        document.touch()
        assert calls == ["first"]
        assert document.subscriber_count == 1

    def test_unknown_handle_ignored(self, document):
        document.unsubscribe(999)
        assert document.subscriber_count == 0


class TestJsonFileDocument:
    def test_missing_file_reads_empty(self, tmp_path, scheduler):
        document = JsonFileDocument(tmp_path / "absent.json", scheduler)
        assert document.snapshot_text() == EMPTY_SNAPSHOT

    def test_reads_snapshot(self, tmp_path, scheduler):
        path = tmp_path / "page.json"
        _write(path, PAGE, 1_000_000)
        document = JsonFileDocument(path, scheduler)
        texts = [fragment.text for fragment in document.snapshot_text()]
        assert texts == ["근무중 2시간 30분", "2시간 30분", "31:00"]

    def test_half_written_file_reads_empty(self, tmp_path, scheduler):
        path = tmp_path / "page.json"
        path.write_text('{"fragments": [{"tag": "but', encoding="utf-8")
        document = JsonFileDocument(path, scheduler)
        assert document.snapshot_text() == EMPTY_SNAPSHOT

    def test_unexpected_shape_reads_empty(self, tmp_path, scheduler):
        path = tmp_path / "page.json"
        path.write_text('"just a string"', encoding="utf-8")
        document = JsonFileDocument(path, scheduler)
        assert document.snapshot_text() == EMPTY_SNAPSHOT

    def test_directory_in_place_of_file_reads_empty(self, tmp_path, scheduler):
        path = tmp_path / "page.json"
        path.mkdir()
        document = JsonFileDocument(path, scheduler)
        assert document.snapshot_text() == EMPTY_SNAPSHOT

    def test_polls_mtime_only_while_subscribed(self, tmp_path, scheduler):
        path = tmp_path / "page.json"
        _write(path, {"fragments": []}, 1_000_000)
        document = JsonFileDocument(path, scheduler, poll_interval_ms=100)
        calls = []
        handle = document.subscribe_to_changes(lambda: calls.append(scheduler.now_ms))
        assert len(scheduler.pending()) == 1

        scheduler.advance(250)
        assert calls == []
        _write(path, PAGE, 1_000_010)
        scheduler.advance(100)
        assert calls == [300]
        scheduler.advance(500)
        assert calls == [300]

        document.unsubscribe(handle)
        assert scheduler.pending() == []

    def test_file_appearing_is_a_change(self, tmp_path, scheduler):
        path = tmp_path / "page.json"
        document = JsonFileDocument(path, scheduler, poll_interval_ms=100)
        calls = []
        document.subscribe_to_changes(lambda: calls.append(1))
        _write(path, PAGE, 1_000_000)
        scheduler.advance(100)
        assert calls == [1]
