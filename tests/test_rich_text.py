"""Tests for the rich-text renderer and its embedded-entry hook."""

from resourcegen.config import Settings
from resourcegen.services.rich_text import first_document, flatten_text, rich_text_to_html

# ---------------------------------------------------------------------------
# Node builders
# ---------------------------------------------------------------------------


def _text(value, *marks):
    return {"nodeType": "text", "value": value, "marks": [{"type": m} for m in marks], "data": {}}


def _node(node_type, *children, data=None):
    return {"nodeType": node_type, "data": data or {}, "content": list(children)}


def _doc(*children):
    return _node("document", *children)


def _para(value):
    return _node("paragraph", _text(value))


def _link(entry_id, link_type="Entry"):
    return {"sys": {"type": "Link", "linkType": link_type, "id": entry_id}}


def _embed(entry_id, inline=False):
    node_type = "embedded-entry-inline" if inline else "embedded-entry-block"
    return _node(node_type, data={"target": _link(entry_id)})


def _entry(entry_id, content_type, **fields):
    return {
        "sys": {"id": entry_id, "contentType": {"sys": {"id": content_type}}},
        "fields": fields,
    }


# ---------------------------------------------------------------------------
# Standard markup
# ---------------------------------------------------------------------------


class TestStandardMarkup:
    def test_paragraph_and_heading(self):
        html = rich_text_to_html(_doc(_node("heading-2", _text("Title")), _para("Body")))
        assert html == "<h2>Title</h2>\n<p>Body</p>"

    def test_marks_nest_around_text(self):
        html = rich_text_to_html(_doc(_node("paragraph", _text("x", "bold", "italic"))))
        assert html == "<p><i><b>x</b></i></p>"

    def test_unknown_mark_is_ignored(self):
        html = rich_text_to_html(_doc(_node("paragraph", _text("x", "sparkle"))))
        assert html == "<p>x</p>"

    def test_text_is_escaped(self):
        html = rich_text_to_html(_doc(_para('<script>"&"</script>')))
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "&amp;" in html

    def test_lists(self):
        doc = _doc(
            _node(
                "unordered-list",
                _node("list-item", _para("one")),
                _node("list-item", _para("two")),
            )
        )
        assert rich_text_to_html(doc) == "<ul><li><p>one</p></li><li><p>two</p></li></ul>"

    def test_hyperlink_href_is_escaped(self):
        link = _node("hyperlink", _text("go"), data={"uri": 'https://x.test/?a=1&b="2"'})
        html = rich_text_to_html(_doc(_node("paragraph", link)))
        assert html == '<p><a href="https://x.test/?a=1&amp;b=&quot;2&quot;">go</a></p>'

    def test_hr_and_blockquote(self):
        html = rich_text_to_html(_doc(_node("hr"), _node("blockquote", _para("q"))))
        assert html == "<hr />\n<blockquote><p>q</p></blockquote>"

    def test_table(self):
        doc = _doc(
            _node(
                "table",
                _node("table-row", _node("table-header-cell", _para("h"))),
                _node("table-row", _node("table-cell", _para("c"))),
            )
        )
        assert rich_text_to_html(doc) == (
            "<table><tr><th><p>h</p></th></tr><tr><td><p>c</p></td></tr></table>"
        )

    def test_unknown_node_type_renders_nothing(self):
        html = rich_text_to_html(_doc(_para("a"), _node("mystery", _text("x")), _para("b")))
        assert html == "<p>a</p>\n<p>b</p>"

    def test_untyped_node_renders_nothing(self):
        html = rich_text_to_html(_doc(_para("a"), {"content": [_text("x")]}, _para("b")))
        assert html == "<p>a</p>\n<p>b</p>"

    def test_newline_in_text_becomes_line_break(self):
        assert rich_text_to_html(_doc(_para("a\nb"))) == "<p>a<br/>b</p>"

    def test_line_break_survives_marks_and_escaping(self):
        html = rich_text_to_html(_doc(_node("paragraph", _text("<a>\nb", "bold"))))
        assert html == "<p><b>&lt;a&gt;<br/>b</b></p>"

    def test_strikethrough_mark(self):
        html = rich_text_to_html(_doc(_node("paragraph", _text("old", "strikethrough"))))
        assert html == "<p><s>old</s></p>"

    def test_entry_hyperlink_keeps_text(self):
        link = _node("entry-hyperlink", _text("see post"), data={"target": _link("p1")})
        assert rich_text_to_html(_doc(_node("paragraph", link))) == "<p>see post</p>"


# ---------------------------------------------------------------------------
# Failure boundary
# ---------------------------------------------------------------------------


class TestMalformedDocuments:
    def test_not_a_document(self):
        assert rich_text_to_html(None) == ""
        assert rich_text_to_html("text") == ""
        assert rich_text_to_html({"nodeType": "document"}) == ""

    def test_non_dict_child(self):
        assert rich_text_to_html(_doc(_para("ok"), "oops")) == ""

    def test_non_list_content(self):
        bad = {"nodeType": "paragraph", "content": "text"}
        assert rich_text_to_html(_doc(bad)) == ""

    def test_non_string_text_value(self):
        bad = {"nodeType": "text", "value": 42, "marks": []}
        assert rich_text_to_html(_doc(_node("paragraph", bad))) == ""


# ---------------------------------------------------------------------------
# Embedded entries and assets
# ---------------------------------------------------------------------------


class TestEmbeddedEntries:
    def test_unknown_embedded_type_contributes_nothing(self):
        includes = {"Entry": [_entry("x1", "videoEmbed", title="Clip")]}
        doc = _doc(_para("before"), _embed("x1"), _para("after"))
        assert rich_text_to_html(doc, includes) == "<p>before</p>\n<p>after</p>"

    def test_unresolved_embed_contributes_nothing(self):
        doc = _doc(_para("before"), _embed("missing"), _para("after"))
        assert rich_text_to_html(doc, {}) == "<p>before</p>\n<p>after</p>"

    def test_block_embed_renders_cta(self):
        cta = _entry("c1", "ctaBlock", heading="Talk to us", buttonUrl="/contact", buttonLabel="Go")
        html = rich_text_to_html(_doc(_embed("c1")), {"Entry": [cta]})
        assert '<div class="cta-block">' in html
        assert '<a class="cta-block-button" href="/contact">Go</a>' in html

    def test_inline_embed_renders_like_block_embed(self):
        cta = _entry("c1", "ctaBlock", heading="Talk to us")
        includes = {"Entry": [cta]}
        block = rich_text_to_html(_doc(_embed("c1")), includes)
        inline = rich_text_to_html(_doc(_node("paragraph", _embed("c1", inline=True))), includes)
        assert inline == f"<p>{block}</p>"

    def test_embed_resolves_from_items(self):
        cta = _entry("c1", "ctaBlock", heading="From items")
        html = rich_text_to_html(_doc(_embed("c1")), {}, [cta])
        assert "From items" in html

    def test_inlined_target(self):
        cta = _entry("c1", "ctaBlock", heading="Inlined")
        node = _node("embedded-entry-block", data={"target": cta})
        assert "Inlined" in rich_text_to_html(_doc(node), {})

    def test_self_embedding_block_stops_at_depth_limit(self):
        self_ref = _entry(
            "loop",
            "richContentBlock",
            richText=_doc(_para("again"), _embed("loop")),
        )
        settings = Settings(max_render_depth=3)
        html = rich_text_to_html(_doc(_embed("loop")), {"Entry": [self_ref]}, [], settings)
        assert html.count("<p>again</p>") == 3

    def test_embedded_asset_renders_image(self):
        asset = {
            "sys": {"id": "a1", "type": "Asset"},
            "fields": {"title": "Chart", "file": {"url": "//img/chart.png"}},
        }
        node = _node("embedded-asset-block", data={"target": _link("a1", "Asset")})
        html = rich_text_to_html(_doc(node), {"Asset": [asset]})
        assert html == '<img src="https://img/chart.png" alt="Chart" loading="lazy" />'

    def test_unresolved_asset_renders_nothing(self):
        node = _node("embedded-asset-block", data={"target": _link("a1", "Asset")})
        assert rich_text_to_html(_doc(node), {}) == ""

    def test_asset_hyperlink_links_to_file(self):
        asset = {"sys": {"id": "a1", "type": "Asset"}, "fields": {"file": {"url": "//files/guide.pdf"}}}
        link = _node("asset-hyperlink", _text("Guide"), data={"target": _link("a1", "Asset")})
        html = rich_text_to_html(_doc(_node("paragraph", link)), {"Asset": [asset]})
        assert html == '<p><a href="https://files/guide.pdf">Guide</a></p>'

    def test_unresolved_asset_hyperlink_keeps_text(self):
        link = _node("asset-hyperlink", _text("Guide"), data={"target": _link("a1", "Asset")})
        assert rich_text_to_html(_doc(_node("paragraph", link)), {}) == "<p>Guide</p>"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_first_document_skips_non_documents(self):
        fields = {"content": "plain", "body": {"en-US": _doc(_para("x"))}}
        assert first_document(fields, ("content", "body")) == _doc(_para("x"))

    def test_first_document_none(self):
        assert first_document({}, ("content",)) is None

    def test_flatten_text_joins_inline_runs(self):
        node = _node("paragraph", _text("Hello "), _text("world", "bold"), _text("!"))
        assert flatten_text(node) == "Hello world!"

    def test_flatten_text_separates_blocks(self):
        node = _node(
            "unordered-list",
            _node("list-item", _para("one")),
            _node("list-item", _para("two")),
        )
        assert flatten_text(node) == "one two"
