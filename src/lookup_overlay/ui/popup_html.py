"""HTML fragments for the popup header and status messages."""

from html import escape
from typing import Optional, Sequence, Tuple

from lookup_overlay.core import FrequencyRecord
from lookup_overlay.services.entry_formatter import furigana_to_ruby

LOADING_HTML = '<div class="loading">Looking up...</div>'


def no_result_html(term: str) -> str:
    return f'<div class="message">No result found for "{escape(term.strip())}".</div>'


def error_html(message: str) -> str:
    return f'<div class="message error">Error fetching from Yomitan: {escape(message)}</div>'


def render_term_html(term: str, reading: str = "", furigana: str = "") -> str:
    """
    Term with its reading on top.

    Bracket furigana wins, then a reading that differs from the term; otherwise
    the bare term is shown. ``reading`` may already contain pitch accent markup.
    """
    clean_term = (term or "").strip()
    if furigana and "[" in furigana:
        return furigana_to_ruby(furigana)
    if reading and reading != clean_term:
        return f"<ruby>{escape(clean_term)}<rt>{reading}</rt></ruby>"
    return f'<div class="term-expression">{escape(clean_term)}</div>'


def render_frequencies_html(frequencies: Sequence[FrequencyRecord]) -> str:
    if not frequencies:
        return ""
    badges = "".join(
        '<div class="frequency-badge">'
        f'<span class="frequency-dict">{escape(record.dictionary)}</span>'
        f'<span class="frequency-value">{escape(record.frequency)}</span>'
        "</div>"
        for record in frequencies
    )
    return f'<div class="frequency-badges">{badges}</div>'


def render_header_html(
    term: str,
    reading: str = "",
    furigana: str = "",
    frequencies: Sequence[FrequencyRecord] = (),
    position: Optional[Tuple[int, int]] = None,
) -> str:
    """Full header: term display, frequency badges and the entry counter."""
    counter = ""
    if position is not None and position[1] > 1:
        current, total = position
        counter = (
            '<div class="entry-nav">'
            '<span class="nav-button" data-step="-1">&#9664;</span>'
            f'<span class="entry-counter">{current} / {total}</span>'
            '<span class="nav-button" data-step="1">&#9654;</span>'
            "</div>"
        )
    return (
        f'<div class="term-display">{render_term_html(term, reading, furigana)}</div>'
        f'<div class="header-frequencies">{render_frequencies_html(frequencies)}</div>'
        f"{counter}"
    )
