"""
Tests for JSON recovery from model responses.
"""

import json

import pytest

from slidefix.errors import MalformedResponse
from slidefix.recovery import (
    RecoveryStrategy,
    analysis_from_value,
    apply_heuristic_fixes,
    extract_json_object,
    parse_analysis,
    recover_json,
)
from slidefix.recovery.json_repair import (
    convert_single_quotes,
    insert_missing_commas,
    normalize_smart_quotes,
    quote_bare_keys,
    remove_trailing_commas,
    strip_code_fences,
    strip_comments,
)


def test_extract_nested_object():
    """Test extraction of the first top-level object from surrounding noise."""
    assert extract_json_object('noise{"a":{"b":1}}moreNoise') == '{"a":{"b":1}}'


def test_extract_ignores_braces_in_strings():
    """Test that braces inside string values do not end the object early."""
    text = 'Result: {"title": "Use } and { carefully", "n": 1} done'
    assert extract_json_object(text) == '{"title": "Use } and { carefully", "n": 1}'


def test_extract_first_of_several_objects():
    """Test that only the first object is taken."""
    assert extract_json_object('{"a": 1} and {"b": 2}') == '{"a": 1}'


def test_extract_without_braces():
    """Test responses with no object at all."""
    assert extract_json_object("no json here") is None
    assert extract_json_object("only an opening { brace") is None
    assert extract_json_object("") is None


def test_extract_unclosed_object_runs_to_end():
    """Test that an object that never closes is sliced to the end."""
    assert extract_json_object('x {"a": {"b": 1}') == '{"a": {"b": 1}'


def test_strip_code_fences():
    """Test markdown fence removal."""
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n[1, 2]\n```') == "[1, 2]"
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_remove_trailing_commas():
    """Test trailing comma removal before closing brackets."""
    assert json.loads(remove_trailing_commas('{"a": 1,}')) == {"a": 1}
    assert json.loads(remove_trailing_commas('{"a": [1, 2, ],\n}')) == {"a": [1, 2]}
    assert remove_trailing_commas('{"a": "x,}"}') == '{"a": "x,}"}'


def test_convert_single_quotes():
    """Test single-quoted keys and values become double-quoted."""
    assert json.loads(convert_single_quotes("{'a': 'x'}")) == {"a": "x"}
    assert json.loads(convert_single_quotes("{'a': ['x', 'y']}")) == {"a": ["x", "y"]}


def test_convert_single_quotes_keeps_apostrophes_in_strings():
    """Test that apostrophes inside double-quoted strings are untouched."""
    text = '{"a": "it\'s fine", \'b\': \'ok\'}'
    assert json.loads(convert_single_quotes(text)) == {"a": "it's fine", "b": "ok"}


def test_quote_bare_keys():
    """Test unquoted keys get quoted."""
    assert quote_bare_keys("{a: 1}") == '{"a": 1}'
    assert json.loads(quote_bare_keys('{fixes: [{type: "add_slide"}]}')) == {
        "fixes": [{"type": "add_slide"}]
    }


def test_quote_bare_keys_leaves_string_values():
    """Test that key-like text inside strings is not rewritten."""
    text = '{"note": "see {a: 1}"}'
    assert quote_bare_keys(text) == text


def test_strip_comments():
    """Test line and block comments are removed outside strings."""
    text = '{\n  "a": 1, // first\n  /* block */ "b": "http://example.com"\n}'
    assert json.loads(strip_comments(text)) == {"a": 1, "b": "http://example.com"}


def test_normalize_smart_quotes():
    """Test curly quotes become plain quotes."""
    assert json.loads(normalize_smart_quotes("{“a”: “x”}")) == {"a": "x"}


def test_insert_missing_commas():
    """Test commas are inserted between values on consecutive lines."""
    text = '{\n  "a": "x"\n  "b": 2\n  "c": true\n  "d": {}\n}'
    assert json.loads(insert_missing_commas(text)) == {"a": "x", "b": 2, "c": True, "d": {}}


@pytest.mark.parametrize(
    "text,expected",
    [
        ('{"a": 1,}', {"a": 1}),
        ("{'a': 'x'}", {"a": "x"}),
        ("{a: 1}", {"a": 1}),
        ('{"a": 1 // count\n}', {"a": 1}),
        ('{"a": 1, // note\n}', {"a": 1}),
        ('{"a": [1, /* last */]}', {"a": [1]}),
        ("{“a”: 1}", {"a": 1}),
    ],
)
def test_heuristic_repairs(text, expected):
    """Test each malformation is repaired by the combined heuristics."""
    assert json.loads(apply_heuristic_fixes(text)) == expected


def test_recover_direct():
    """Test a clean response parses directly."""
    result = recover_json('{"fixes": []}')

    assert result.strategy == RecoveryStrategy.DIRECT
    assert result.value == {"fixes": []}
    assert result.ok


def test_recover_direct_from_code_fence():
    """Test a fenced response still counts as a direct parse."""
    result = recover_json('```json\n{"fixes": []}\n```')
    assert result.strategy == RecoveryStrategy.DIRECT


def test_recover_extracted_from_prose():
    """Test a response wrapped in prose is extracted."""
    result = recover_json('Here is my analysis:\n{"fixes": [{"type": "add_slide"}]}\nHope it helps!')

    assert result.strategy == RecoveryStrategy.EXTRACTED
    assert result.value["fixes"][0]["type"] == "add_slide"


def test_recover_ai_corrected():
    """Test the corrector receives the snippet and parse error."""
    calls = []

    def corrector(snippet, error):
        calls.append((snippet, error))
        return 'Sure! Here you go: {"fixes": [], "overall_assessment": "ok"}'

    result = recover_json('Analysis: {"fixes": [} trailing', corrector)

    assert result.strategy == RecoveryStrategy.AI_CORRECTED
    assert result.value == {"fixes": [], "overall_assessment": "ok"}
    assert calls[0][0] == '{"fixes": [}'
    assert calls[0][1]


def test_recover_ai_correction_without_braces():
    """Test a corrector reply with no braces is parsed as a whole."""
    result = recover_json('{"fixes": [}', lambda snippet, error: "[]")

    assert result.strategy == RecoveryStrategy.AI_CORRECTED
    assert result.value == []


def test_recover_falls_back_to_heuristics_when_corrector_fails():
    """Test a failing corrector does not stop the heuristic step."""

    def corrector(snippet, error):
        raise RuntimeError("network down")

    result = recover_json("{'fixes': [],}", corrector)

    assert result.strategy == RecoveryStrategy.HEURISTIC
    assert result.value == {"fixes": []}


def test_recover_heuristic_after_bad_correction():
    """Test an unparseable correction is ignored."""
    result = recover_json("{fixes: []}", lambda snippet, error: "still {broken")

    assert result.strategy == RecoveryStrategy.HEURISTIC
    assert result.value == {"fixes": []}


def test_recover_heuristic_without_corrector():
    """Test heuristics run when no corrector is supplied."""
    result = recover_json("The fixes: {fixes: [{type: 'add_slide',}],}")

    assert result.strategy == RecoveryStrategy.HEURISTIC
    assert result.value == {"fixes": [{"type": "add_slide"}]}


def test_recover_comment_after_trailing_comma():
    """Test a trailing comma followed by a comment is repaired."""
    result = recover_json('{"a": 1, // note\n}')

    assert result.strategy == RecoveryStrategy.HEURISTIC
    assert result.value == {"a": 1}


def test_recover_no_object_fails_without_calling_corrector():
    """Test that free text skips straight to failure."""
    calls = []
    result = recover_json("I think the deck looks great.", lambda s, e: calls.append(s))

    assert result.strategy == RecoveryStrategy.FAILED
    assert result.raw == "I think the deck looks great."
    assert calls == []


def test_recover_unrecoverable():
    """Test an object beyond repair fails without raising."""
    result = recover_json("{ this is :: not [ json }")

    assert not result.ok
    assert result.error
    with pytest.raises(MalformedResponse) as exc_info:
        result.unwrap()
    assert exc_info.value.raw == "{ this is :: not [ json }"


def test_recover_none_and_empty():
    """Test that missing responses fail cleanly."""
    assert recover_json(None).strategy == RecoveryStrategy.FAILED
    assert recover_json("").strategy == RecoveryStrategy.FAILED


def test_analysis_from_value():
    """Test interpretation of recovered values."""
    analysis = analysis_from_value({"fixes": [{"type": "add_slide"}], "overall_assessment": "Fine"})
    assert len(analysis.fixes) == 1

    from_list = analysis_from_value([{"type": "modify_slide", "position": "slide_1"}])
    assert from_list.fixes[0].position_descriptor == "slide_1"

    assert analysis_from_value({"unrelated": True}) is None
    assert analysis_from_value("text") is None


def test_parse_analysis():
    """Test end-to-end parsing of a messy response."""
    response = """Here's what I found:
```json
{
  "issues_found": [{"category": "flow", "severity": "high", "affected_slides": [2]},],
  "fixes": [{"type": "modify_slide|reorder_slides", "position": "slide_2"}],
}
```"""
    analysis = parse_analysis(response)

    assert analysis.issues[0].affected_positions == [2]
    assert analysis.fixes[0].kind_label == "modify_slide|reorder_slides"
    assert parse_analysis("nothing useful") is None


def test_parse_analysis_float_affected_slides():
    """Test numeric slide references of any JSON type are accepted."""
    analysis = parse_analysis(
        '{"issues_found": [{"description": "x", "affected_slides": 3.0},'
        ' {"description": "y", "affected_slides": 2.5}],'
        ' "fixes": [{"type": "add_slide", "position": "end"}]}'
    )

    assert [issue.affected_positions for issue in analysis.issues] == [[3], []]
    assert analysis.fixes[0].kind_label == "add_slide"
