"""Tests for semantic section detection (app.services.sections)."""

from app.models.page import PageImage
from app.services.dom import parse_html
from app.services.section_patterns import classify_identifiers, classify_text
from app.services.sections import extract_sections


def _sections(html, images=None):
    return extract_sections(parse_html(html), images or [])


# ---------------------------------------------------------------------------
# Shared HTML fixtures
# ---------------------------------------------------------------------------

_SEMANTIC_HTML = """
<html><body>
  <section class="hero-banner">
    <h1>Welcome to Acme</h1>
    <p>We build great things for great people.</p>
    <img src="/img/hero.jpg">
    <a class="btn" href="/contact">Get a quote</a>
  </section>
  <section id="about">
    <h2>About us</h2>
    <p>Founded in 1999, we have served thousands of clients.</p>
  </section>
  <section>
    <h2>What our clients say</h2>
    <p>"Acme fixed our roof in a single day, amazing."</p>
  </section>
  <footer><p>&copy; 2024 Acme Inc. All rights reserved.</p></footer>
</body></html>
"""

_HEADER_HTML = """
<html><body>
  <header class="site-header">
    <h1>Acme Plumbing</h1>
    <p>Fast and friendly plumbers in Springfield.</p>
  </header>
  <section class="services">
    <h2>Our services</h2>
    <p>Drain cleaning, leak repair and installs.</p>
  </section>
</body></html>
"""

_PARAGRAPHS_ONLY_HTML = """
<html><body>
  <div>
    <p>First paragraph with more than twenty characters.</p>
    <p>Second paragraph that is also long enough.</p>
    <p>Third paragraph to feed the call to action.</p>
  </div>
  <footer>Copyright 2024 Acme</footer>
</body></html>
"""


class TestExplicitSections:
    def test_types_follow_class_id_then_heading(self):
        sections = _sections(_SEMANTIC_HTML)
        assert [s.type for s in sections] == ["hero", "about", "testimonials", "footer"]

    def test_order_is_contiguous(self):
        sections = _sections(_SEMANTIC_HTML)
        assert [s.order for s in sections] == [0, 1, 2, 3]

    def test_hero_heading_subheading_and_cta(self):
        hero = _sections(_SEMANTIC_HTML)[0]
        assert hero.heading == "Welcome to Acme"
        assert hero.subheading == "We build great things for great people."
        assert hero.cta_text == "Get a quote"
        assert hero.identifiers == ["hero-banner"]

    def test_images_are_matched_to_their_section(self):
        image = PageImage(src="https://acme.test/img/hero.jpg", is_hero=True)
        sections = _sections(_SEMANTIC_HTML, [image])
        assert sections[0].images == [image]
        assert sections[1].images == []

    def test_footer_keeps_its_own_paragraphs(self):
        footer = _sections(_SEMANTIC_HTML)[-1]
        assert footer.type == "footer"
        assert footer.content == ["© 2024 Acme Inc. All rights reserved."]

    def test_short_paragraphs_are_not_content(self):
        html = "<html><body><section><h2>Hi</h2><p>Too short.</p></section></body></html>"
        section = _sections(html)[0]
        assert section.content == []

    def test_empty_sections_are_dropped(self):
        html = (
            "<html><body><section></section>"
            "<section class='hero'><h1>Hello there</h1></section></body></html>"
        )
        sections = _sections(html)
        assert len(sections) == 1
        assert sections[0].type == "hero"


class TestFallbackPasses:
    def test_heading_only_page_yields_single_hero(self):
        sections = _sections("<html><body><h1>Acme</h1><p>We fix things.</p></body></html>")

        assert len(sections) == 1
        assert sections[0].type == "hero"
        assert sections[0].heading == "Acme"
        assert sections[0].subheading == "We fix things."

    def test_headings_after_the_first_are_classified_by_text(self):
        html = (
            "<html><body><main>"
            "<h1>Acme</h1><p>We fix things all day long.</p>"
            "<h2>Frequently asked questions</h2><p>Do you work weekends? Yes we do.</p>"
            "</main></body></html>"
        )
        sections = _sections(html)
        assert [s.type for s in sections] == ["hero", "faq"]

    def test_loose_containers_are_used_when_no_semantic_markup(self):
        html = (
            "<html><body><div class='pricing-section'><h2>Plans</h2>"
            "<p>Starter plan from $9 per month for everyone.</p></div></body></html>"
        )
        sections = _sections(html)
        assert [s.type for s in sections] == ["pricing"]

    def test_header_is_unshifted_as_hero(self):
        sections = _sections(_HEADER_HTML)

        assert [s.type for s in sections] == ["hero", "services"]
        assert sections[0].heading == "Acme Plumbing"
        assert [s.order for s in sections] == [0, 1]

    def test_existing_hero_moves_to_front(self):
        html = (
            "<html><body>"
            "<section id='about'><h2>About us</h2><p>We have been around since 1999 at least.</p></section>"
            "<section class='hero'><h1>Big welcome</h1><p>The hero copy that should lead the page.</p></section>"
            "</body></html>"
        )
        sections = _sections(html)
        assert [s.type for s in sections] == ["hero", "about"]
        assert sum(1 for s in sections if s.type == "hero") == 1


class TestSyntheticSections:
    def test_paragraph_only_page_gets_hero_cta_and_footer(self):
        sections = _sections(_PARAGRAPHS_ONLY_HTML)

        assert [s.type for s in sections] == ["hero", "cta", "footer"]
        assert [s.order for s in sections] == [0, 1, 2]

    def test_synthetic_hero_uses_first_paragraphs(self):
        hero = _sections(_PARAGRAPHS_ONLY_HTML)[0]
        assert hero.heading == "Welcome"
        assert hero.subheading == "First paragraph with more than twenty characters."
        assert len(hero.content) == 2

    def test_synthetic_cta_defaults_to_contact_us(self):
        cta = _sections(_PARAGRAPHS_ONLY_HTML)[1]
        assert cta.cta_text == "Contact Us"
        assert cta.content == ["Third paragraph to feed the call to action."]

    def test_synthetic_footer_uses_footer_text(self):
        footer = _sections(_PARAGRAPHS_ONLY_HTML)[-1]
        assert footer.content == ["Copyright 2024 Acme"]

    def test_synthetic_hero_uses_title_when_no_heading(self):
        html = (
            "<html><head><title>Acme Home</title></head><body>"
            "<p>Just one paragraph of reasonable length here.</p></body></html>"
        )
        sections = _sections(html)
        assert sections[0].heading == "Acme Home"

    def test_empty_body_yields_no_sections(self):
        assert _sections("<html><body></body></html>") == []


class TestClassifiers:
    def test_identifier_table_order(self):
        assert classify_identifiers("hero-banner", "") == "hero"
        assert classify_identifiers("", "contact-us") == "contact"
        assert classify_identifiers("plain", "") == "other"

    def test_heading_text(self):
        assert classify_text("Meet the team") == "team"
        assert classify_text("Our Services") == "services"
        assert classify_text("Something else entirely") == "other"
