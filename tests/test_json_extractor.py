import json

import pytest

from enhancer.llm.llm_exceptions import ExtractionError
from enhancer.llm.llm_json_extractor import EnhancementPayload, recover


def assert_extraction_error(raw, code):
    with pytest.raises(ExtractionError) as info:
        recover(raw)
    assert info.value.code == code
    return info.value


# --- Successful recovery ---

class TestRecover:

    def test_bare_object(self):
        assert recover('{"enhancedText": "Hello"}').enhanced_text == "Hello"

    def test_surrounding_whitespace(self):
        assert recover('\n\n   {"enhancedText": "Hello"}  \n').enhanced_text == "Hello"

    def test_prose_before_and_after(self):
        raw = 'Here is the improved text: {"enhancedText": "Hello"} Hope that helps!'
        assert recover(raw).enhanced_text == "Hello"

    def test_fenced_block_with_language_tag(self):
        raw = 'Sure! Here you go:\n\n```json\n{"enhancedText": "Hello"}\n```'
        assert recover(raw).enhanced_text == "Hello"

    def test_fenced_block_without_language_tag(self):
        raw = '```\n{"enhancedText": "Hello"}\n```\nLet me know if you need changes.'
        assert recover(raw).enhanced_text == "Hello"

    def test_fence_without_json_falls_back_to_whole_text(self):
        raw = 'Use `code` like this:\n```\nprint(1)\n```\n{"enhancedText": "Hello"}'
        assert recover(raw).enhanced_text == "Hello"

    def test_optional_fields(self):
        payload = recover('{"enhancedText": "Hi", "model": "gpt-4o", "notes": "shortened"}')
        assert payload == EnhancementPayload(enhanced_text="Hi", model="gpt-4o", notes="shortened")

    def test_null_optional_fields(self):
        payload = recover('{"enhancedText": "Hi", "model": null}')
        assert payload.model is None

    def test_escaped_quotes_and_newlines_round_trip(self):
        original = 'She said "hi"\nthen left\\n\tquietly'
        raw = 'Result:\n' + json.dumps({"enhancedText": original})
        assert recover(raw).enhanced_text == original

    def test_braces_inside_string_values(self):
        raw = 'Output: {"enhancedText": "use {name} and \\"}\\" here"} done'
        assert recover(raw).enhanced_text == 'use {name} and "}" here'

    def test_first_valid_candidate_wins(self):
        raw = 'broken { not json } then {"enhancedText": "second"}'
        assert recover(raw).enhanced_text == "second"

    def test_nested_object(self):
        raw = '{"enhancedText": "Hi", "meta": {"a": {"b": 1}}}'
        assert recover(raw).enhanced_text == "Hi"

    def test_payload_to_json_round_trip(self):
        payload = EnhancementPayload(enhanced_text='a "quoted"\nline', notes='n')
        assert recover(payload.to_json()) == payload


# --- Failures ---

class TestRecoverErrors:

    def test_empty_input(self):
        assert_extraction_error('', ExtractionError.NO_JSON_FOUND)

    def test_whitespace_input(self):
        assert_extraction_error('   \n ', ExtractionError.NO_JSON_FOUND)

    def test_no_opening_brace(self):
        assert_extraction_error('I could not do that.', ExtractionError.NO_JSON_FOUND)

    def test_empty_enhanced_text(self):
        error = assert_extraction_error('{"enhancedText": ""}', ExtractionError.MISSING_FIELD)
        assert error.field == "enhancedText"

    def test_whitespace_enhanced_text(self):
        assert_extraction_error('{"enhancedText": "   "}', ExtractionError.MISSING_FIELD)

    def test_missing_key(self):
        assert_extraction_error('{"text": "Hello"}', ExtractionError.INVALID_JSON)

    def test_wrong_type(self):
        assert_extraction_error('{"enhancedText": 42}', ExtractionError.INVALID_JSON)

    def test_unterminated_object(self):
        assert_extraction_error('{"enhancedText": "Hello"', ExtractionError.INVALID_JSON)

    def test_first_valid_candidate_failing_schema_is_final(self):
        raw = '{"other": 1} {"enhancedText": "Hello"}'
        assert_extraction_error(raw, ExtractionError.INVALID_JSON)

    def test_error_carries_user_message(self):
        error = assert_extraction_error('nothing', ExtractionError.NO_JSON_FOUND)
        assert error.kind == 'extraction'
        assert 'JSON' in error.user_message
