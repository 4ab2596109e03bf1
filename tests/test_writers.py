import io
import json

import pytest

from j2t.schema import sorted_fields
from j2t.writers import (
    FORMAT_CSV,
    FORMAT_JSON,
    FORMAT_LIST,
    FORMAT_TABLE,
    render,
    write_csv,
    write_json,
    write_list,
    write_table,
)

SCHEMA = {
    "b": {"string": "x", "number": "1"},
    "a": {"bool": "true"},
    "a.long_name[]": {"unknown": "null"},
}
FIELDS = sorted_fields(SCHEMA)


def _render(writer, **kwargs) -> str:
    stream = io.StringIO()
    writer(stream, FIELDS, SCHEMA, **kwargs)
    return stream.getvalue()


def test_fields_are_sorted() -> None:
    assert FIELDS == ["a", "a.long_name[]", "b"]


def test_list_pads_columns() -> None:
    # widest field is 13 chars, widest kind ("unknown") is 7
    expected = (
        "field".ljust(14) + "type".ljust(8) + "content\n"
        + "a".ljust(14) + "bool".ljust(8) + "true\n"
        + "a.long_name[]".ljust(14) + "unknown".ljust(8) + "null\n"
        + "b".ljust(14) + "number".ljust(8) + "1\n"
        + "b".ljust(14) + "string".ljust(8) + "x\n"
    )
    assert _render(write_list, headers=True) == expected


def test_list_merge_joins_kinds() -> None:
    expected = (
        "a".ljust(14) + "bool".ljust(14) + "true\n"
        + "a.long_name[]".ljust(14) + "unknown".ljust(14) + "null\n"
        + "b".ljust(14) + "number;string".ljust(14) + "1;x\n"
    )
    assert _render(write_list, merge=True) == expected


def test_list_of_empty_schema() -> None:
    stream = io.StringIO()
    write_list(stream, [], {}, headers=True)
    assert stream.getvalue() == "field type content\n"


def test_json_compact() -> None:
    output = _render(write_json)
    assert output.endswith("]\n")
    assert ", " not in output and ": " not in output
    assert json.loads(output) == [
        {"field": "a", "types": [{"type": "bool", "content": "true"}]},
        {"field": "a.long_name[]", "types": [{"type": "unknown", "content": "null"}]},
        {
            "field": "b",
            "types": [
                {"type": "number", "content": "1"},
                {"type": "string", "content": "x"},
            ],
        },
    ]


def test_json_pretty_print_indents() -> None:
    output = _render(write_json, pretty_print=True)
    assert output.startswith('[\n    {\n        "field": "a",')
    assert json.loads(output) == json.loads(_render(write_json))


def test_json_keeps_non_ascii() -> None:
    stream = io.StringIO()
    write_json(stream, ["名前"], {"名前": {"string": "é"}})
    assert stream.getvalue() == '[{"field":"名前","types":[{"type":"string","content":"é"}]}]\n'


def test_csv_rows_and_header() -> None:
    expected = (
        "field,type,content\n"
        "a,bool,true\n"
        "a.long_name[],unknown,null\n"
        "b,number,1\n"
        "b,string,x\n"
    )
    assert _render(write_csv, headers=True) == expected


def test_csv_merge_and_quoting() -> None:
    schema = {"q": {"string": 'a,"b"', "bool": "false"}}
    stream = io.StringIO()
    write_csv(stream, ["q"], schema, merge=True)
    assert stream.getvalue() == 'q,bool;string,"false;a,""b"""\n'


def test_table_lists_every_field() -> None:
    output = _render(write_table)
    assert "Inferred Schema" in output
    for field in FIELDS:
        assert field in output
    assert "unknown" in output


@pytest.mark.parametrize("output_format", [FORMAT_LIST, FORMAT_JSON, FORMAT_CSV, FORMAT_TABLE])
def test_render_is_repeatable(output_format) -> None:
    first, second = io.StringIO(), io.StringIO()
    render(output_format, first, SCHEMA, merge=True, headers=True)
    render(output_format, second, SCHEMA, merge=True, headers=True)
    assert first.getvalue() == second.getvalue()
    assert first.getvalue()


def test_render_does_not_mutate_schema() -> None:
    snapshot = {k: dict(v) for k, v in SCHEMA.items()}
    render(FORMAT_LIST, io.StringIO(), SCHEMA, merge=True)
    assert SCHEMA == snapshot


def test_render_unknown_format() -> None:
    with pytest.raises(ValueError):
        render("yaml", io.StringIO(), SCHEMA)
