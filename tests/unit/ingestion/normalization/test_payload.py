"""Unit tests for LLM payload recovery."""

import pytest

from hackflow.ingestion.errors import ParseError
from hackflow.ingestion.normalization.payload import (
    extract_payload_span,
    parse_payload,
    strip_code_fences,
)


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n[1, 2]\n```') == "[1, 2]"

    def test_no_fence_is_untouched(self):
        assert strip_code_fences('{"a": 1}') == '{"a": 1}'


class TestExtractPayloadSpan:
    def test_array_span_drops_surrounding_prose(self):
        raw = 'Here is what I found:\n[{"title": "A"}]\nHope this helps!'
        assert extract_payload_span(raw, "array") == '[{"title": "A"}]'

    def test_object_shape_only_trims(self):
        assert extract_payload_span('  {"title": "A"}  \n') == '{"title": "A"}'

    def test_none_input(self):
        assert extract_payload_span(None) == ""


class TestParsePayload:
    def test_fenced_and_bare_parse_identically(self):
        bare = '{"title": "Decentrathon", "city": "Астана"}'
        fenced = f"```json\n{bare}\n```"
        assert parse_payload(fenced) == parse_payload(bare)

    def test_prose_wrapped_object(self):
        raw = 'Sure! {"title": "Decentrathon"} Let me know if you need more.'
        assert parse_payload(raw) == {"title": "Decentrathon"}

    def test_prose_wrapped_array(self):
        raw = 'Results:\n```json\n[{"title": "A"}, {"title": "B"}]\n```'
        assert parse_payload(raw, "array") == [{"title": "A"}, {"title": "B"}]

    def test_malformed_json_raises_with_raw_attached(self):
        with pytest.raises(ParseError) as exc:
            parse_payload('{"title": "A",')
        assert exc.value.raw == '{"title": "A",'

    def test_wrong_top_level_type(self):
        with pytest.raises(ParseError):
            parse_payload('[{"title": "A"}]', "object")
        with pytest.raises(ParseError):
            parse_payload('{"title": "A"}', "array")

    def test_empty_array(self):
        assert parse_payload("[]", "array") == []
