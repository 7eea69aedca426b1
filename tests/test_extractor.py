"""Tests for per-page extraction (app.services.extractor)."""

import pytest

from app.services.extractor import detect_page_type, extract_page

_PAGE_URL = "https://acme.test/about/"
_BASE = "https://acme.test"

_ABOUT_HTML = """
<!DOCTYPE html>
<html>
<head>
  <title>About | Acme Plumbing</title>
  <meta name="description" content="Fast, friendly plumbers.">
  <meta name="keywords" content="plumbing, repair, ">
  <meta property="og:title" content="About Acme">
  <link rel="icon" href="/favicon.ico">
</head>
<body>
  <header>
    <a href="/"><img src="/img/logo.png" alt="Acme Plumbing"></a>
    <nav>
      <a href="/about/">About</a>
      <a href="/services">Services</a>
      <a href="#top">Top</a>
      <a href="javascript:void(0)">Menu</a>
      <p>Menu paragraph text that is long enough to count</p>
    </nav>
  </header>
  <main>
    <h1>About Acme</h1>
    <p>We have been fixing leaks across Springfield since 1999.</p>
    <div class="hero"><img src="/img/hero.jpg" width="1200"></div>
    <img src="team.jpg" alt="Our team">
    <img src="/img/logo.png">
    <ul><li>Drains</li><li>Leaks</li></ul>
    <a href="https://twitter.com/acme">Twitter</a>
    <a href="mailto:info@acme.test?subject=Hi">Email us</a>
    <a href="tel:+15551234">Call us</a>
    <a href="/services">Services again</a>
  </main>
  <footer><p>&copy; 2024 Acme Plumbing. All rights reserved.</p></footer>
</body>
</html>
"""


@pytest.fixture(scope="module")
def page():
    return extract_page(_ABOUT_HTML, _PAGE_URL, depth=1, base_url=_BASE, load_time_ms=42)


class TestPageBasics:
    def test_url_path_and_depth(self, page):
        assert page.url == _PAGE_URL
        assert page.path == "/about/"
        assert page.depth == 1
        assert page.load_time_ms == 42
        assert page.page_type == "about"

    def test_title(self, page):
        assert page.title == "About | Acme Plumbing"

    def test_title_falls_back_to_h1(self):
        result = extract_page("<html><body><h1>Only Heading</h1></body></html>", "https://acme.test/")
        assert result.title == "Only Heading"

    def test_title_falls_back_to_untitled(self):
        result = extract_page("<html><body><p>x</p></body></html>", "https://acme.test/")
        assert result.title == "Untitled"


class TestMeta:
    def test_description_and_og(self, page):
        assert page.meta.description == "Fast, friendly plumbers."
        assert page.meta.og_title == "About Acme"
        assert page.meta.og_image is None

    def test_keywords_are_split_and_trimmed(self, page):
        assert page.meta.keywords == ["plumbing", "repair"]

    def test_favicon(self, page):
        assert page.meta.favicon == "/favicon.ico"


class TestContent:
    def test_headings(self, page):
        assert [(h.level, h.text) for h in page.content.headings] == [(1, "About Acme")]

    def test_paragraphs_skip_nav_and_footer(self, page):
        assert page.content.paragraphs == ["We have been fixing leaks across Springfield since 1999."]

    def test_lists(self, page):
        assert len(page.content.lists) == 1
        assert page.content.lists[0].type == "ul"
        assert page.content.lists[0].items == ["Drains", "Leaks"]


class TestImages:
    def test_sources_are_absolute_and_deduplicated(self, page):
        assert [img.src for img in page.images] == [
            "https://acme.test/img/logo.png",
            "https://acme.test/img/hero.jpg",
            "https://acme.test/about/team.jpg",
        ]

    def test_logo_flag(self, page):
        logo = page.images[0]
        assert logo.is_logo is True
        assert logo.alt == "Acme Plumbing"
        assert page.images[2].is_logo is False

    def test_hero_flag_and_width(self, page):
        hero = page.images[1]
        assert hero.is_hero is True
        assert hero.width == 1200

    def test_header_image_without_indicator_is_logo(self):
        html = '<html><body><header><img src="/mark.svg"></header></body></html>'
        result = extract_page(html, "https://acme.test/")
        assert result.images[0].is_logo is True

    def test_data_uri_images_are_skipped_unless_logo(self):
        html = '<html><body><img src="data:image/png;base64,AAAA"></body></html>'
        assert extract_page(html, "https://acme.test/").images == []

    def test_malformed_sources_are_skipped(self):
        html = (
            "<html><body><h1>Bad</h1>"
            '<img src="ftp://[broken"><img src="HTTP://[x"><img src="/ok.png">'
            "</body></html>"
        )
        result = extract_page(html, "https://acme.test/")
        assert [img.src for img in result.images] == ["https://acme.test/ok.png"]


class TestLinks:
    def test_internal_links_are_resolved_and_unique(self, page):
        assert page.links.internal == [
            "https://acme.test/",
            "https://acme.test/about/",
            "https://acme.test/services",
        ]

    def test_external_links(self, page):
        assert page.links.external == ["https://twitter.com/acme"]

    def test_mailto_and_tel(self, page):
        assert page.links.emails == ["info@acme.test"]
        assert page.links.phones == ["+15551234"]

    def test_other_hosts_are_external(self):
        html = '<html><body><a href="https://www.acme.test/x">x</a></body></html>'
        result = extract_page(html, "https://acme.test/", base_url="https://acme.test")
        assert result.links.internal == []
        assert result.links.external == ["https://www.acme.test/x"]


class TestSectionsAndForms:
    def test_page_has_sections(self, page):
        assert page.sections
        assert [s.order for s in page.sections] == list(range(len(page.sections)))

    def test_page_without_forms(self, page):
        assert page.forms == []


class TestDetectPageType:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/", "home"),
            ("/index.html", "home"),
            ("/home", "home"),
            ("/about-us", "about"),
            ("/contact", "contact"),
            ("/services/plumbing", "services"),
            ("/products", "products"),
            ("/blog", "blog"),
            ("/news/launch", "blog"),
            ("/work/kitchen", "portfolio"),
            ("/pricing", "pricing"),
            ("/faq", "faq"),
            ("/team", "team"),
            ("/privacy-policy", "legal"),
            ("/terms", "legal"),
            ("/2024/05/launch-day", "blog-post"),
            ("/random", "other"),
        ],
    )
    def test_classification(self, path, expected):
        assert detect_page_type(path) == expected

    def test_case_insensitive(self):
        assert detect_page_type("/About") == "about"
