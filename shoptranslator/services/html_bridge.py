from __future__ import annotations

import html
import logging

from bs4 import BeautifulSoup, NavigableString, Tag


logger = logging.getLogger(__name__)


def strip_html(markup: str) -> str:
    """Return the text content of an HTML fragment with every tag removed."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    return soup.get_text()


def restore_html(original_markup: str, translated_text: str) -> str:
    """Put ``translated_text`` back into ``original_markup``.

    Only fragments with exactly one non-blank text node are rewritten, and
    only that node's text changes; every other byte of the markup is kept.
    Any other shape is returned untouched; the plain-text translation is
    still available to the caller.
    """
    soup = BeautifulSoup(original_markup, "html.parser")
    # Comments, doctypes, CDATA and script bodies are NavigableString subclasses.
    text_nodes = [
        node
        for node in soup.find_all(string=True)
        if type(node) is NavigableString and node.strip()
    ]

    if len(text_nodes) != 1:
        logger.info(
            "Markup has %s text nodes; keeping original structure untranslated",
            len(text_nodes),
        )
        return original_markup

    node = text_nodes[0]
    span = _locate_text(original_markup, node.strip(), _source_offset(original_markup, node.parent))
    if span is None:
        logger.info("Could not locate the text node in the source markup; keeping it untranslated")
        return original_markup

    start, end = span
    return original_markup[:start] + html.escape(translated_text, quote=False) + original_markup[end:]


def _source_offset(markup: str, tag: Tag | None) -> int:
    """Character offset of ``tag``'s opening ``<`` in ``markup`` (0 for the document)."""
    if tag is None or tag.sourceline is None or tag.sourcepos is None:
        return 0
    lines = markup.split("\n")
    return sum(len(line) + 1 for line in lines[: tag.sourceline - 1]) + tag.sourcepos


def _locate_text(markup: str, text: str, offset: int) -> tuple[int, int] | None:
    """Find ``text`` as element content (between ``>`` and ``<``) at or after ``offset``."""
    candidates = dict.fromkeys((text, html.escape(text, quote=False), html.escape(text)))
    for raw in candidates:
        position = markup.find(raw, offset)
        while position != -1:
            end = position + len(raw)
            before = markup[:position].rstrip()
            after = markup[end:].lstrip()
            if (not before or before.endswith(">")) and (not after or after.startswith("<")):
                return position, end
            position = markup.find(raw, position + 1)
    return None
