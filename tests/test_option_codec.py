from __future__ import annotations

import json
from typing import Callable

import pytest

from quickreply.option_codec import (
    DecodeError,
    decode,
    encode,
    extract_match_url,
    options_from_records,
    options_to_records,
)
from quickreply.options import Option, OptionDefaults, OptionKind
from quickreply.template import DEFAULT_TEMPLATE

SAMPLE_SCRIPT = r"""// ==UserScript==
// @name         Support ticket quick replies
// @match        https://support.example.com/admin/supporttickets.php*
// ==/UserScript==

(function () {
    'use strict';

    const QUICK_REPLY_OPTIONS = JSON.parse('[{"type":"byId","id":"greeting","text":"","name":"Hello","colour":"#abc"},{"text":"Line one\\nIt\'s \\"two\\"","name":"Custom"}]');
})();
"""


def fields(option: Option) -> tuple[object, ...]:
    return (option.kind, option.selector, option.content, option.label, option.colour)


def test_decode_reads_records_in_order(ids: Callable[[], str]) -> None:
    options = decode(SAMPLE_SCRIPT, ids=ids)

    assert [option.uid for option in options] == ["uid-1", "uid-2"]
    assert [option.order for option in options] == [1, 2]
    assert fields(options[0]) == (OptionKind.BY_ID, "greeting", "", "Hello", "#abc000")
    assert fields(options[1]) == (
        OptionKind.CUSTOM,
        "",
        "Line one\nIt's \"two\"",
        "Custom",
        "#3c8dbc",
    )


def test_decode_applies_configured_defaults(ids: Callable[[], str]) -> None:
    script = "const QUICK_REPLY_OPTIONS = JSON.parse('[{\"id\":\"signature\"}]');"
    defaults = OptionDefaults(label="Untitled", colour="#222222")

    (option,) = decode(script, ids=ids, defaults=defaults)

    assert fields(option) == (OptionKind.BY_ID, "signature", "", "Untitled", "#222222")


def test_decode_without_options_block_returns_empty_list() -> None:
    assert decode("// just some unrelated script\nconsole.log('hi');") == []


def test_decode_of_unfilled_template_returns_empty_list() -> None:
    assert decode(DEFAULT_TEMPLATE) == []


def test_decode_reports_broken_array_literal() -> None:
    script = "const QUICK_REPLY_OPTIONS = JSON.parse('[{\"name\":\"oops\",]');"

    with pytest.raises(DecodeError, match="not valid JSON"):
        decode(script)


def test_decode_reports_excessive_nesting() -> None:
    depth = 100000
    script = "const QUICK_REPLY_OPTIONS = JSON.parse('" + "[" * depth + "]" * depth + "');"

    with pytest.raises(DecodeError, match="nested too deeply"):
        decode(script)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ('{"name":"x"}', "must be an array"),
        ('["x"]', "option #1 must be an object"),
        ('[{"name":"x"},{"label":"y"}]', "option #2 has unsupported keys: label"),
        ('[{"name":5}]', "field 'name' must be a string"),
    ],
)
def test_decode_rejects_unexpected_structure(payload: str, message: str) -> None:
    script = f"const QUICK_REPLY_OPTIONS = JSON.parse('{payload}');"

    with pytest.raises(DecodeError, match=message):
        decode(script)


def test_decode_infers_kind_when_type_is_unrecognised(ids: Callable[[], str]) -> None:
    records = [
        {"type": "legacy", "text": "Custom words"},
        {"type": "legacy", "id": "closing"},
        {"name": None, "id": "resolved"},
    ]

    options = options_from_records(records, ids=ids)

    assert [option.kind for option in options] == [
        OptionKind.CUSTOM,
        OptionKind.BY_ID,
        OptionKind.BY_ID,
    ]
    assert options[2].label == "New button"


def test_explicit_type_wins_over_leftover_text(ids: Callable[[], str]) -> None:
    (option,) = options_from_records(
        [{"type": "byId", "id": "greeting", "text": "leftover"}], ids=ids
    )

    assert option.kind is OptionKind.BY_ID
    assert option.content == "leftover"


def test_encode_substitutes_every_placeholder() -> None:
    template = "// @match {{URL_MATCH}}\nconst A = JSON.parse('{{OPTIONS}}');\n// {{URL_MATCH}}\n"
    options = [
        Option(
            uid="one",
            kind=OptionKind.CUSTOM,
            content="It's\nok",
            label='Say "hi"',
            colour="#abc000",
        )
    ]

    script = encode(options, "https://example.com/admin/supporttickets.php", template)

    expected_literal = (
        r'''[{"type":"custom","id":"","text":"It\'s\\nok",'''
        r'''"name":"Say \\"hi\\"","colour":"#abc000"}]'''
    )
    assert script == (
        "// @match https://example.com/admin/supporttickets.php*\n"
        f"const A = JSON.parse('{expected_literal}');\n"
        "// https://example.com/admin/supporttickets.php*\n"
    )


def test_encode_emits_selector_and_text_for_both_kinds() -> None:
    options = [
        Option(uid="a", kind=OptionKind.BY_ID, selector="greeting", content="stale"),
        Option(uid="b", kind=OptionKind.CUSTOM, selector="closing", content="Thanks"),
    ]

    records = options_to_records(options)

    assert [set(record) for record in records] == [
        {"type", "id", "text", "name", "colour"}
    ] * 2
    assert records[0]["text"] == "stale"
    assert records[1]["id"] == "closing"


def test_encode_then_decode_preserves_option_fields(ids: Callable[[], str]) -> None:
    original = decode(SAMPLE_SCRIPT, ids=ids)

    script = encode(
        original, "https://support.example.com/admin/supporttickets.php", DEFAULT_TEMPLATE
    )
    decoded = decode(script, ids=ids)

    assert [fields(option) for option in decoded] == [
        fields(option) for option in original
    ]
    assert [option.order for option in decoded] == [1, 2]
    assert {option.uid for option in decoded}.isdisjoint(
        option.uid for option in original
    )


def test_encode_output_is_valid_json_once_unescaped() -> None:
    options = [Option(uid="a", label="Multi\nline 'label'", content='"quoted"')]

    script = encode(options, "https://example.com/admin/supporttickets.php", DEFAULT_TEMPLATE)

    assert "{{OPTIONS}}" not in script
    assert "{{URL_MATCH}}" not in script
    assert "// @match        https://example.com/admin/supporttickets.php*" in script
    assert "\n" not in script.split("JSON.parse('", 1)[1].split("');", 1)[0]


def test_options_to_records_can_keep_real_newlines() -> None:
    options = [Option(uid="a", content="one\r\ntwo", label="x")]

    assert options_to_records(options)[0]["text"] == "one\\ntwo"
    assert options_to_records(options, escape_newlines=False)[0]["text"] == "one\r\ntwo"
    exported = json.dumps(options_to_records(options, escape_newlines=False))
    assert options_from_records(json.loads(exported))[0].content == "one\r\ntwo"


def test_extract_match_url_strips_wildcard() -> None:
    assert (
        extract_match_url(SAMPLE_SCRIPT)
        == "https://support.example.com/admin/supporttickets.php"
    )
    assert extract_match_url(DEFAULT_TEMPLATE) is None
    assert extract_match_url("no header here") is None
