"""Tests for per-page derived values: SEO, author, dates, FAQs and result blocks."""

from resourcegen.models.metadata import AuthorProfile, FaqPair
from resourcegen.services.extractors import (
    build_faq_schema,
    build_results_from_result_blocks,
    extract_faq_pairs,
    format_published_date,
    get_author,
    get_featured_image_url,
    get_seo,
    render_author_card,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _text(value):
    return {"nodeType": "text", "value": value, "marks": [], "data": {}}


def _block(node_type, value):
    return {"nodeType": node_type, "data": {}, "content": [_text(value)]}


def _doc(*nodes):
    return {"nodeType": "document", "data": {}, "content": list(nodes)}


def _list(node_type, *items):
    return {
        "nodeType": node_type,
        "data": {},
        "content": [
            {"nodeType": "list-item", "data": {}, "content": [_block("paragraph", item)]}
            for item in items
        ],
    }


def _link(entry_id, link_type="Entry"):
    return {"sys": {"type": "Link", "linkType": link_type, "id": entry_id}}


def _asset(asset_id, url):
    return {"sys": {"id": asset_id, "type": "Asset"}, "fields": {"file": {"url": url}}}


def _entry(entry_id, **fields):
    return {"sys": {"id": entry_id}, "fields": fields}


# ---------------------------------------------------------------------------
# FAQ extraction
# ---------------------------------------------------------------------------


class TestExtractFaqPairs:
    def test_pairs_with_multi_paragraph_answer(self):
        doc = _doc(
            _block("heading-2", "Q1"),
            _block("paragraph", "A1a"),
            _block("paragraph", "A1b"),
            _block("heading-3", "Q2"),
            _block("paragraph", "A2"),
        )
        assert extract_faq_pairs(doc) == [
            FaqPair(question="Q1", answer="A1a A1b"),
            FaqPair(question="Q2", answer="A2"),
        ]

    def test_orphan_heading_is_dropped(self):
        assert extract_faq_pairs(_doc(_block("heading-2", "Orphan"))) == []

    def test_trailing_orphan_after_pair(self):
        doc = _doc(_block("heading-2", "Q"), _block("paragraph", "A"), _block("heading-2", "Orphan"))
        assert extract_faq_pairs(doc) == [FaqPair(question="Q", answer="A")]

    def test_content_before_first_heading_is_ignored(self):
        doc = _doc(_block("paragraph", "intro"), _block("heading-2", "Q"), _block("paragraph", "A"))
        assert extract_faq_pairs(doc) == [FaqPair(question="Q", answer="A")]

    def test_lists_extend_answers(self):
        doc = _doc(
            _block("heading-2", "Which?"),
            _block("paragraph", "These:"),
            _list("unordered-list", "one", "two"),
        )
        assert extract_faq_pairs(doc) == [FaqPair(question="Which?", answer="These: one two")]

    def test_heading_1_is_not_a_question(self):
        doc = _doc(_block("heading-1", "Title"), _block("paragraph", "A"))
        assert extract_faq_pairs(doc) == []

    def test_not_a_document(self):
        assert extract_faq_pairs(None) == []
        assert extract_faq_pairs({"nodeType": "document"}) == []


class TestBuildFaqSchema:
    def test_empty(self):
        assert build_faq_schema([]) is None

    def test_single_pair(self):
        schema = build_faq_schema([FaqPair(question="Q", answer="A")])
        assert schema["@type"] == "FAQPage"
        assert len(schema["mainEntity"]) == 1
        question = schema["mainEntity"][0]
        assert question["@type"] == "Question"
        assert question["name"] == "Q"
        assert question["acceptedAnswer"] == {"@type": "Answer", "text": "A"}

    def test_order_is_preserved(self):
        pairs = [FaqPair(question=f"Q{i}", answer=f"A{i}") for i in range(3)]
        names = [q["name"] for q in build_faq_schema(pairs)["mainEntity"]]
        assert names == ["Q0", "Q1", "Q2"]


# ---------------------------------------------------------------------------
# SEO
# ---------------------------------------------------------------------------


class TestGetSeo:
    def test_absent_entity(self):
        seo = get_seo(None)
        assert seo.title is None
        assert seo.share_images == []

    def test_fields_and_share_images(self):
        includes = {"Asset": [_asset("a1", "//img/1.png"), _asset("a2", "https://img/2.png")]}
        entity = _entry(
            "s1",
            pageTitle="SEO Title",
            pageDescription="SEO description",
            canonicalUrl="https://example.com/x/",
            noindex=True,
            shareImages=[_link("a1", "Asset"), _link("missing", "Asset"), _link("a2", "Asset")],
        )
        seo = get_seo(entity, includes)
        assert seo.title == "SEO Title"
        assert seo.description == "SEO description"
        assert seo.canonical_url == "https://example.com/x/"
        assert seo.noindex is True
        assert seo.nofollow is None
        assert seo.share_images == ["https://img/1.png", "https://img/2.png"]


# ---------------------------------------------------------------------------
# Author
# ---------------------------------------------------------------------------


class TestGetAuthor:
    def test_missing_name_is_none(self):
        entity = _entry("p1", bio="Writes things", roleCompany="Editor, Acme")
        assert get_author(entity) is None

    def test_absent_entity(self):
        assert get_author(None) is None

    def test_full_author(self):
        includes = {"Asset": [_asset("av", "//img/face.jpg")]}
        entity = _entry("p1", name="Ada", avatar=_link("av", "Asset"), bio=" Bio ", roleCompany="CTO")
        author = get_author(entity, includes)
        assert author == AuthorProfile(
            name="Ada", avatar_url="https://img/face.jpg", bio="Bio", role_company="CTO"
        )

    def test_rich_text_bio_is_flattened(self):
        entity = _entry("p1", name="Ada", bio=_doc(_block("paragraph", "Likes  engines.")))
        assert get_author(entity).bio == "Likes engines."

    def test_author_card(self):
        html = render_author_card(AuthorProfile(name="Ada & Co", role_company="CTO"))
        assert '<span class="blog-author-name">Ada &amp; Co</span>' in html
        assert '<span class="blog-author-role">CTO</span>' in html
        assert "blog-author-avatar" not in html
        assert render_author_card(None) == ""


# ---------------------------------------------------------------------------
# Featured image and dates
# ---------------------------------------------------------------------------


class TestFeaturedImage:
    def test_linked_asset(self):
        includes = {"Asset": [_asset("f1", "//img/hero.png")]}
        page = _entry("b1", featuredImage=_link("f1", "Asset"))
        assert get_featured_image_url(page, includes) == "https://img/hero.png"

    def test_snake_case_alias(self):
        includes = {"Asset": [_asset("f1", "//img/hero.png")]}
        page = _entry("b1", featured_image=_link("f1", "Asset"))
        assert get_featured_image_url(page, includes) == "https://img/hero.png"

    def test_unresolved(self):
        assert get_featured_image_url(_entry("b1", featuredImage=_link("x", "Asset")), {}) == ""


class TestFormatPublishedDate:
    def test_date_only(self):
        assert format_published_date("2024-03-05") == "March 5, 2024"

    def test_datetime_with_z(self):
        assert format_published_date("2023-12-31T23:30:00.000Z") == "December 31, 2023"

    def test_datetime_with_offset(self):
        assert format_published_date("2024-01-09T10:00+02:00") == "January 9, 2024"

    def test_unparsable(self):
        assert format_published_date("not a date") == ""
        assert format_published_date("") == ""
        assert format_published_date(None) == ""


# ---------------------------------------------------------------------------
# Result blocks
# ---------------------------------------------------------------------------


class TestResultBlocks:
    def test_metric_description_and_graph(self):
        includes = {
            "Entry": [
                _entry(
                    "r1",
                    metricValue="+240%",
                    metricLabel="organic traffic",
                    description="In six months.",
                    graphImage=_link("g1", "Asset"),
                )
            ],
            "Asset": [_asset("g1", "//img/graph.png")],
        }
        html = build_results_from_result_blocks([_link("r1")], includes)
        assert html.startswith('<div class="result-block">')
        assert '<p class="result-metric"><strong>+240%</strong> organic traffic</p>' in html
        assert "<p>In six months.</p>" in html
        assert 'class="results-graph"' in html

    def test_empty_and_unresolved_blocks_are_skipped(self):
        includes = {"Entry": [_entry("r1", unrelated="x")]}
        assert build_results_from_result_blocks([_link("r1"), _link("gone")], includes) == ""
