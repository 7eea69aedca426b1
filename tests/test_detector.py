"""Tests for app.services.detector.detect_technologies."""

from app.services.detector import detect_technologies


# ---------------------------------------------------------------------------
# CMS detection
# ---------------------------------------------------------------------------

class TestDetectWordPress:
    def test_wp_content_path(self):
        html = '<img src="/wp-content/uploads/2024/photo.jpg">'
        assert "wordpress" in detect_technologies(html)

    def test_wp_includes_path(self):
        html = '<script src="/wp-includes/js/wp-emoji.js"></script>'
        assert detect_technologies(html) == ["wordpress"]

    def test_wp_rest_api_link(self):
        html = '<link rel="https://api.w.org/" href="https://example.com/wp-json/">'
        assert detect_technologies(html) == ["wordpress"]

    def test_wp_generator_meta(self):
        html = '<meta name="generator" content="WordPress 6.4.2">'
        assert detect_technologies(html) == ["wordpress"]


class TestDetectHostedBuilders:
    def test_shopify(self):
        html = '<link href="https://cdn.shopify.com/s/files/1/theme.css" rel="stylesheet">'
        assert detect_technologies(html) == ["shopify"]

    def test_wix(self):
        assert detect_technologies('<img src="https://static.wixstatic.com/media/a.jpg">') == ["wix"]

    def test_squarespace(self):
        assert detect_technologies('<script src="https://static1.squarespace.com/x.js"></script>') == ["squarespace"]


# ---------------------------------------------------------------------------
# Framework detection
# ---------------------------------------------------------------------------

class TestDetectFrameworks:
    def test_next_data_script(self):
        html = '<div id="__next"></div><script id="__NEXT_DATA__" type="application/json">{}</script>'
        assert "next.js" in detect_technologies(html)

    def test_nuxt(self):
        assert "nuxt" in detect_technologies('<div id="__nuxt"></div><script>window.__NUXT__={}</script>')

    def test_react_root(self):
        assert detect_technologies('<div id="root"></div>') == ["react"]

    def test_angular_version_attribute(self):
        assert detect_technologies('<app-root ng-version="17.0.0"></app-root>') == ["angular"]

    def test_jquery_and_bootstrap(self):
        html = (
            '<link href="/css/bootstrap.min.css" rel="stylesheet">'
            '<script src="/js/jquery-3.7.1.min.js"></script>'
        )
        assert detect_technologies(html) == ["jquery", "bootstrap"]


class TestMultipleAndNone:
    def test_table_order_for_several_matches(self):
        html = '/wp-content/themes/site/style.css<script src="/js/jquery.min.js"></script>'
        assert detect_technologies(html) == ["wordpress", "jquery"]

    def test_plain_html_detects_nothing(self):
        html = "<html><body><h1>Hello</h1><p>Static page.</p></body></html>"
        assert detect_technologies(html) == []
