"""Tests for the event envelope decoder and verbatim JSON slicing."""

from __future__ import annotations

import json

import pytest

from devops.event import DecodeError, Event, EventType, decode_event, event_to_dict
from devops.event.rawjson import scan_array, scan_object


class TestScanArray:
    """Tests for splitting arrays into verbatim elements."""

    def test_elements_keep_source_text(self):
        """Each element keeps its exact source text, whitespace inside included."""
        text = '[ {"b": 1,  "a": 2} , 3,"x" ,null]'
        elements = scan_array(text)

        assert [raw for _, raw in elements] == ['{"b": 1,  "a": 2}', "3", '"x"', "null"]
        assert [value for value, _ in elements] == [{"b": 1, "a": 2}, 3, "x", None]

    def test_empty_array(self):
        assert scan_array(" [ ] ") == []

    def test_not_an_array(self):
        with pytest.raises(json.JSONDecodeError):
            scan_array('{"a": 1}')

    def test_trailing_data(self):
        with pytest.raises(json.JSONDecodeError):
            scan_array("[1] 2")

    def test_truncated(self):
        with pytest.raises(json.JSONDecodeError):
            scan_array("[1,")


class TestScanObject:
    """Tests for splitting objects into verbatim fields."""

    def test_fields_keep_source_text(self):
        fields = scan_object('{"type": "run.started", "data": {"x":  [1, 2]}}')

        assert fields["type"] == ("run.started", '"run.started"')
        assert fields["data"] == ({"x": [1, 2]}, '{"x":  [1, 2]}')

    def test_duplicate_name_keeps_last(self):
        fields = scan_object('{"a": 1, "a": 2}')
        assert fields["a"] == (2, "2")

    def test_invalid(self):
        with pytest.raises(json.JSONDecodeError):
            scan_object('{"a" 1}')


class TestDecodeEvent:
    """Tests for decode_event."""

    def test_decode_full_envelope(self):
        """All envelope fields decode; data is kept verbatim."""
        raw = (
            b'{"type": "run.started", "source": "job/a/", "id": "1", '
            b'"time": "2022-01-01T00:00:00Z", "dataType": "T", "data": {"k": "v"}}'
        )
        event = decode_event(raw)

        assert event == Event(
            type="run.started",
            source="job/a/",
            id="1",
            time="2022-01-01T00:00:00Z",
            data_type="T",
            data=b'{"k": "v"}',
        )

    def test_missing_fields_default_to_empty(self):
        event = decode_event("{}")
        assert event == Event()
        assert event.data == b""

    def test_null_data_is_empty(self):
        event = decode_event('{"type": "run.started", "data": null}')
        assert event.data == b""

    @pytest.mark.parametrize("raw", [b"", b"not json", b"[]", b'"text"', b'{"type": 1}'])
    def test_malformed_envelope(self, raw):
        with pytest.raises(DecodeError):
            decode_event(raw)

    def test_invalid_utf8(self):
        with pytest.raises(DecodeError):
            decode_event(b'{"type": "\xff"}')

    def test_decode_error_chains_cause(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_event(b"{")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_type_equals(self):
        event = Event(type="run.completed")
        assert event.type_equals(EventType.RUN_COMPLETED)
        assert event.type_equals("run.completed")
        assert not event.type_equals(EventType.RUN_STARTED)

    def test_event_to_dict(self, make_event):
        body = make_event("run.deleted", data={"projectName": "p"})
        assert event_to_dict(decode_event(body)) == json.loads(body)

    def test_deeply_nested_envelope(self):
        """Nesting beyond the parser's depth limit is a decode failure."""
        raw = '{"type": "run.started", "data": ' + "[" * 200000 + "]" * 200000 + "}"

        with pytest.raises(DecodeError):
            decode_event(raw)
