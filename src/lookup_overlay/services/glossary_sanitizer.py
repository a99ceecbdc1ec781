"""Glossary Sanitizer - Rewrites dictionary HTML for display and export."""

import logging
import posixpath
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from lookup_overlay.core import DictionaryMediaItem

logger = logging.getLogger(__name__)

ORIGINAL_SRC_ATTR = "data-original-src"
LINK_DISABLED_ATTR = "data-link-disabled"
NUMBERED_DICTIONARY = "Jitendex"

IMAGE_MIME_TYPES = {
    "png": "image/png",
    "gif": "image/gif",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}
DEFAULT_IMAGE_MIME = "image/png"

_CIRCLED_NUMBER_RE = re.compile(r"^[①-⑳]\s*")
_DICTIONARY_SELECTOR_RE = re.compile(r"""\[data-dictionary=["']?([^\]"']+)["']?\]""")
_RECURSIVE_AT_RULES = ("@media", "@supports", "@container", "@layer", "@document")


def mime_type_for(filename: str) -> str:
    extension = posixpath.splitext(filename.lower())[1].lstrip(".")
    return IMAGE_MIME_TYPES.get(extension, DEFAULT_IMAGE_MIME)


def _split_declarations(style: str) -> List[str]:
    """Split declarations on ``;`` outside parentheses and quotes."""
    parts = []
    depth = 0
    quote = None
    start = 0
    for index, char in enumerate(style):
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == ";" and depth == 0:
            parts.append(style[start:index])
            start = index + 1
    parts.append(style[start:])
    return parts


def _parse_style(style: str) -> List[Tuple[str, str]]:
    declarations = []
    for part in _split_declarations(style):
        if ":" not in part:
            continue
        name, value = part.split(":", 1)
        if name.strip():
            declarations.append((name.strip(), value.strip()))
    return declarations


def set_inline_style(tag: Tag, **properties: str) -> None:
    """Set CSS properties on ``tag`` (underscores become dashes), keeping the rest."""
    declarations = dict(_parse_style(tag.get("style", "")))
    for name, value in properties.items():
        declarations[name.replace("_", "-")] = value
    tag["style"] = " ".join(f"{name}: {value};" for name, value in declarations.items())


def _find_media(reference: str, media: Sequence[DictionaryMediaItem]) -> Optional[DictionaryMediaItem]:
    basename = posixpath.basename(reference.replace("\\", "/"))
    for item in media:
        if item.matches(reference) or item.matches(basename):
            return item
    return None


def _inline_images(soup: BeautifulSoup, media: Sequence[DictionaryMediaItem]) -> None:
    for img in soup.find_all("img"):
        src = img.get("src", "")
        if src.startswith("data:"):
            continue

        reference = img.get(ORIGINAL_SRC_ATTR) or src
        item = _find_media(reference, media) if reference else None
        if item is None:
            img.decompose()
            continue

        img[ORIGINAL_SRC_ATTR] = reference
        img["src"] = f"data:{mime_type_for(reference)};base64,{item.content}"


def _disable_links(soup: BeautifulSoup) -> None:
    for element in soup.select("a, [data-link]"):
        set_inline_style(element, pointer_events="none", cursor="default")
        element[LINK_DISABLED_ATTR] = "true"


def _strip_leading_number(node) -> None:
    if isinstance(node, NavigableString):
        node.replace_with(_CIRCLED_NUMBER_RE.sub("", str(node)))
        return
    for text in node.find_all(string=True):
        if text.strip():
            text.replace_with(_CIRCLED_NUMBER_RE.sub("", str(text)))
            return


def _clean_numbered_dictionary(soup: BeautifulSoup) -> None:
    for block in soup.select(f'[data-dictionary*="{NUMBERED_DICTIONARY}"]'):
        for glossary in block.select('[data-sc-content="glossary"]'):
            for child in list(glossary.children):
                if isinstance(child, Comment):
                    continue
                if isinstance(child, Tag):
                    if child.name == "span" and child.has_attr("data-details"):
                        continue
                    text = child.get_text()
                elif isinstance(child, NavigableString):
                    text = str(child)
                    if not text.strip():
                        continue
                else:
                    continue
                if _CIRCLED_NUMBER_RE.match(text):
                    _strip_leading_number(child)

        for item in block.find_all("li"):
            set_inline_style(item, list_style="none")


def _clean_dictionary_titles(soup: BeautifulSoup) -> None:
    for block in soup.select("[data-dictionary]"):
        title = next((child for child in block.children if isinstance(child, Tag)), None)
        if title is not None:
            title.string = re.sub(r"[()]", "", title.get_text()).strip()


def sanitize_glossary(html: str, media: Sequence[DictionaryMediaItem] = ()) -> str:
    """
    Prepare glossary HTML for the popup.

    Images are inlined from ``media`` (the original reference is kept in
    ``data-original-src``) or dropped, links are disabled, Jitendex sense
    numbering is removed and dictionary titles lose their parentheses.
    Running it again on its own output changes nothing.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    _inline_images(soup, media)
    _disable_links(soup)
    _clean_numbered_dictionary(soup)
    _clean_dictionary_titles(soup)
    return str(soup)


def revert_inlined_images(html: str) -> str:
    """Point inlined images back at their original export filenames."""
    soup = BeautifulSoup(html, "html.parser")
    for img in soup.find_all("img"):
        original = img.get(ORIGINAL_SRC_ATTR)
        if original is None:
            continue
        img["src"] = original
        del img[ORIGINAL_SRC_ATTR]
    return str(soup)


def _split_css(css: str) -> Iterable[Tuple[str, Optional[str]]]:
    """Yield ``(prelude, body)`` for block rules and ``(statement, None)`` otherwise."""
    depth = 0
    start = 0
    prelude = ""
    for index, char in enumerate(css):
        if char == "{":
            if depth == 0:
                prelude = css[start:index].strip()
                start = index + 1
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                yield prelude, css[start:index]
                start = index + 1
            depth = max(depth, 0)
        elif char == ";" and depth == 0:
            statement = css[start:index].strip()
            if statement:
                yield statement + ";", None
            start = index + 1

    tail = css[start:].strip()
    if tail and depth == 0:
        yield tail, None


def _filter_rules(css: str, dictionary: str) -> List[str]:
    kept: List[str] = []
    for prelude, body in _split_css(css):
        if body is None:
            kept.append(prelude)
            continue

        lowered = prelude.lower()
        if lowered.startswith("@") and not lowered.startswith(_RECURSIVE_AT_RULES):
            kept.append(f"{prelude} {{{body}}}")
            continue

        match = _DICTIONARY_SELECTOR_RE.search(prelude)
        if match and match.group(1) != dictionary:
            continue

        if "{" in body and not match:
            inner = " ".join(_filter_rules(body, dictionary)).strip()
            if inner:
                kept.append(f"{prelude} {{ {inner} }}")
            continue

        kept.append(f"{prelude} {{{body}}}")
    return kept


def filter_dictionary_styles(css: str, dictionary: str) -> str:
    """
    Keep the CSS that applies to ``dictionary``.

    Rules scoped to another ``[data-dictionary=...]`` are dropped; unscoped
    rules, keyframes and font faces stay. The result is a single line.
    """
    css = re.sub(r"/\*.*?\*/", "", css or "", flags=re.S)
    filtered = " ".join(_filter_rules(css, dictionary))
    return re.sub(r"\s*\n+\s*", " ", filtered).strip()


def build_dictionary_export(block_html: str, dictionary: str, css: str = "") -> str:
    """Wrap one dictionary block, with its filtered styles, for the export field."""
    style_html = ""
    if css and css.strip():
        style_html = f"<style>{filter_dictionary_styles(css, dictionary)}</style>"
    return (
        '<div class="yomitan-glossary" style="text-align: left;">'
        f"<ol>{block_html}</ol></div>{style_html}"
    )
