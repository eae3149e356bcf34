import json

from elasticq.highlight import new_highlight, new_highlight_opts
from elasticq.query import query


def get_json(value):
    return json.loads(json.dumps(value.to_dict()))


def full_opts():
    return (
        new_highlight_opts()
        .tags("<div>", "</div>")
        .boundary_chars("asdf")
        .boundary_max_scan(100)
        .frag_size(10)
        .num_frags(50)
        .order("order")
        .type("fdsa")
        .matched_fields("1", "2")
    )


def check_full(actual):
    assert actual["pre_tags"][0] == "<div>"
    assert actual["post_tags"][0] == "</div>"
    assert actual["boundary_chars"] == "asdf"
    assert actual["boundary_max_scan"] == 100
    assert actual["fragment_size"] == 10
    assert actual["number_of_fragments"] == 50
    assert actual["matched_fields"] == ["1", "2"]
    assert actual["order"] == "order"
    assert actual["type"] == "fdsa"


def test_embed_dsl():
    actual = get_json(new_highlight().set_options(full_opts()))
    check_full(actual)


def test_field_dsl():
    result = get_json(new_highlight().add_field("whatever", full_opts()))
    check_full(result["fields"]["whatever"])


def test_embed_and_field_dsl():
    highlight = (
        new_highlight()
        .set_options(new_highlight_opts().tags("<div>", "</div>"))
        .add_field("afield", new_highlight_opts().type("something"))
    )
    actual = get_json(highlight)
    assert actual["pre_tags"][0] == "<div>"
    assert actual["post_tags"][0] == "</div>"
    assert actual["fields"]["afield"]["type"] == "something"


def test_add_field_without_settings_is_empty_object():
    assert get_json(new_highlight().add_field("f", None)) == {"fields": {"f": {}}}


def test_tags_accumulate():
    opts = new_highlight_opts().tags("<a>", "</a>").tags("<b>", "</b>")
    assert opts.to_dict() == {"pre_tags": ["<a>", "<b>"], "post_tags": ["</a>", "</b>"]}


def test_schema_and_empty():
    assert new_highlight().to_dict() == {}
    assert new_highlight().schema("styled").to_dict() == {"tag_schema": "styled"}


def test_highlight_query():
    opts = new_highlight_opts()
    opts.highlight_query = query().term("user", "kimchy")
    assert get_json(opts) == {"highlight_query": {"term": {"user": "kimchy"}}}