from app.domain.services.decoder import DecodeFailure, DecodedSuggestions, decode_suggestions

KNOWN = {"p1", "p2", "p3"}


def _ids(result):
    assert isinstance(result, DecodedSuggestions), result
    return [e.product_id for e in result.entries]


def test_plain_json_array():
    raw = '[{"productId": "p2", "relevance": "high", "explanation": "Great fit"}, {"productId": "p1", "relevance": "low"}]'
    result = decode_suggestions(raw, KNOWN)

    assert _ids(result) == ["p2", "p1"]
    assert result.entries[0].relevance == "high"
    assert result.entries[0].explanation == "Great fit"
    assert result.entries[1].explanation is None


def test_code_fenced_array():
    raw = '```json\n[{"productId": "p1", "relevance": "medium", "explanation": "ok"}]\n```'

    assert _ids(decode_suggestions(raw, KNOWN)) == ["p1"]


def test_array_embedded_in_prose():
    raw = 'Sure! Here are my picks:\n[{"productId": "p3", "relevance": "High", "explanation": "x"}]\nHope this helps.'
    result = decode_suggestions(raw, KNOWN)

    assert _ids(result) == ["p3"]
    assert result.entries[0].relevance == "high"


def test_array_wrapped_in_an_object():
    raw = '{"recommendations": [{"productId": "p1", "relevance": "high", "explanation": "x"}]}'

    assert _ids(decode_suggestions(raw, KNOWN)) == ["p1"]


def test_not_json_is_a_failure():
    assert isinstance(decode_suggestions("not json", KNOWN), DecodeFailure)


def test_empty_or_missing_reply_is_a_failure():
    assert isinstance(decode_suggestions("", KNOWN), DecodeFailure)
    assert isinstance(decode_suggestions("   \n", KNOWN), DecodeFailure)
    assert isinstance(decode_suggestions(None, KNOWN), DecodeFailure)


def test_broken_embedded_array_is_a_failure():
    assert isinstance(decode_suggestions('here: [{"productId": "p1",]', KNOWN), DecodeFailure)


def test_unknown_ids_are_discarded():
    raw = '[{"productId": "ghost", "relevance": "high"}, {"productId": "p2", "relevance": "low"}]'

    assert _ids(decode_suggestions(raw, KNOWN)) == ["p2"]


def test_only_unknown_ids_is_a_failure():
    raw = '[{"productId": "ghost", "relevance": "high"}]'

    assert isinstance(decode_suggestions(raw, KNOWN), DecodeFailure)


def test_malformed_entries_and_duplicates_are_dropped():
    raw = (
        '[{"relevance": "high"}, "p1", 42, '
        '{"productId": "p1", "relevance": "low", "explanation": "first"}, '
        '{"productId": "p1", "relevance": "high", "explanation": "second"}]'
    )
    result = decode_suggestions(raw, KNOWN)

    assert _ids(result) == ["p1"]
    assert result.entries[0].explanation == "first"


def test_numeric_ids_and_missing_relevance():
    result = decode_suggestions('[{"productId": 7}]', {"7"})

    assert _ids(result) == ["7"]
    assert result.entries[0].relevance == "medium"
