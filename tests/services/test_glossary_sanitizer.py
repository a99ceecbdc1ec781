"""Unit tests for glossary HTML sanitizing and export helpers."""

from bs4 import BeautifulSoup

from lookup_overlay.core import DictionaryMediaItem
from lookup_overlay.services import (
    build_dictionary_export,
    filter_dictionary_styles,
    revert_inlined_images,
    sanitize_glossary,
)
from lookup_overlay.services.glossary_sanitizer import mime_type_for

MEDIA = [
    DictionaryMediaItem(filename="img/cat.png", content="Q0FU", anki_filename="yomitan_cat.png"),
    DictionaryMediaItem(filename="diagram.svg", content="U1ZH"),
]


def _soup(html):
    return BeautifulSoup(html, "html.parser")


class TestImages:
    def test_known_image_is_inlined_and_original_kept(self):
        html = sanitize_glossary('<div><img src="img/cat.png" alt="cat"></div>', MEDIA)

        img = _soup(html).find("img")
        assert img["src"] == "data:image/png;base64,Q0FU"
        assert img["data-original-src"] == "img/cat.png"

    def test_export_filename_matches(self):
        html = sanitize_glossary('<img src="yomitan_cat.png">', MEDIA)

        assert _soup(html).find("img")["src"].startswith("data:image/png;base64,")

    def test_svg_mime_type(self):
        html = sanitize_glossary('<img src="diagram.svg">', MEDIA)

        assert _soup(html).find("img")["src"] == "data:image/svg+xml;base64,U1ZH"

    def test_unknown_image_is_removed(self):
        html = sanitize_glossary('<p>text<img src="missing.png"></p>', MEDIA)

        assert _soup(html).find("img") is None
        assert "text" in html

    def test_without_media_all_images_are_removed(self):
        assert "<img" not in sanitize_glossary('<img src="img/cat.png"><img src="x.gif">')

    def test_mime_types(self):
        assert mime_type_for("a.PNG") == "image/png"
        assert mime_type_for("a.jpg") == "image/jpeg"
        assert mime_type_for("a.jpeg") == "image/jpeg"
        assert mime_type_for("a.gif") == "image/gif"
        assert mime_type_for("a.webp") == "image/webp"
        assert mime_type_for("a.bmp") == "image/png"
        assert mime_type_for("noextension") == "image/png"

    def test_revert_restores_original_reference_exactly(self):
        original = "img/猫 picture (1).png"
        media = [DictionaryMediaItem(filename=original, content="AAAA")]

        inlined = sanitize_glossary(f'<img src="{original}">', media)
        reverted = revert_inlined_images(inlined)

        img = _soup(reverted).find("img")
        assert img["src"] == original
        assert not img.has_attr("data-original-src")


class TestLinks:
    def test_links_are_disabled(self):
        html = sanitize_glossary(
            '<a href="?query=x">x</a><span data-link="y" style="color: red;">y</span>'
        )

        soup = _soup(html)
        link = soup.find("a")
        assert link["href"] == "?query=x"
        assert link["data-link-disabled"] == "true"
        assert "pointer-events: none;" in link["style"]
        assert "cursor: default;" in link["style"]
        span = soup.find("span")
        assert span["style"].startswith("color: red;")
        assert "pointer-events: none;" in span["style"]

    def test_existing_style_with_data_url_survives(self):
        html = sanitize_glossary(
            '<a href="x" style="background: url(data:image/png;base64,AAA); color: red">x</a>'
        )

        style = _soup(html).find("a")["style"]
        assert style == (
            "background: url(data:image/png;base64,AAA); color: red; "
            "pointer-events: none; cursor: default;"
        )


class TestIdempotence:
    def test_second_pass_changes_nothing(self):
        raw = (
            '<div data-dictionary="Jitendex [2024]">'
            "<span>(Jitendex)</span>"
            '<ul><li><div data-sc-content="glossary">①to eat<span data-details="x">①</span></div></li></ul>'
            '<a href="x">link</a><img src="img/cat.png"><img src="gone.png">'
            "</div>"
        )

        once = sanitize_glossary(raw, MEDIA)
        twice = sanitize_glossary(once, MEDIA)

        assert twice == once

    def test_second_pass_without_media_keeps_inlined_images(self):
        once = sanitize_glossary('<img src="img/cat.png">', MEDIA)

        assert sanitize_glossary(once) == once


class TestDictionaryBlocks:
    def test_circled_numbers_stripped_for_jitendex(self):
        html = sanitize_glossary(
            '<div data-dictionary="Jitendex.org [2024-05-01]"><span>Jitendex</span>'
            '<ol><li><div data-sc-content="glossary">① to eat<span>② bold</span>'
            '<span data-details="note">③ keep</span></div></li></ol></div>'
        )

        soup = _soup(html)
        glossary = soup.find(attrs={"data-sc-content": "glossary"})
        assert glossary.get_text().startswith("to eat")
        assert "② " not in glossary.get_text()
        assert "③ keep" in glossary.get_text()
        assert "list-style: none;" in soup.find("li")["style"]

    def test_other_dictionaries_keep_numbering(self):
        html = sanitize_glossary(
            '<div data-dictionary="JMdict"><span>JMdict</span>'
            '<ol><li><div data-sc-content="glossary">① to eat</div></li></ol></div>'
        )

        soup = _soup(html)
        assert soup.find(attrs={"data-sc-content": "glossary"}).get_text() == "① to eat"
        assert not soup.find("li").has_attr("style")

    def test_title_parentheses_removed(self):
        html = sanitize_glossary('<li data-dictionary="JMdict"><i>(JMdict) </i><ul><li>x</li></ul></li>')

        assert _soup(html).find("i").get_text() == "JMdict"


class TestStyles:
    CSS = """
    .gloss { color: white; }
    [data-dictionary="JMdict"] .tag { color: red; }
    [data-dictionary="Jitendex"] .tag { color: blue; }
    @media (max-width: 600px) {
        [data-dictionary="Jitendex"] .x { margin: 0; }
        [data-dictionary="JMdict"] .x { margin: 1px; }
    }
    @keyframes fade { from { opacity: 0; } to { opacity: 1; } }
    """

    def test_rules_for_other_dictionaries_are_dropped(self):
        filtered = filter_dictionary_styles(self.CSS, "JMdict")

        assert ".gloss { color: white; }" in filtered
        assert "color: red" in filtered
        assert "color: blue" not in filtered
        assert "margin: 1px" in filtered
        assert "margin: 0" not in filtered
        assert "@keyframes fade" in filtered
        assert "\n" not in filtered

    def test_empty_media_block_is_dropped(self):
        css = '@media print { [data-dictionary="Other"] .x { color: red; } }'

        assert filter_dictionary_styles(css, "JMdict") == ""

    def test_export_wrapper(self):
        exported = build_dictionary_export('<li data-dictionary="JMdict">x</li>', "JMdict", ".a { b: c; }")

        assert exported == (
            '<div class="yomitan-glossary" style="text-align: left;">'
            '<ol><li data-dictionary="JMdict">x</li></ol></div>'
            "<style>.a { b: c; }</style>"
        )

    def test_export_without_css(self):
        exported = build_dictionary_export("<li>x</li>", "JMdict")

        assert "<style>" not in exported
