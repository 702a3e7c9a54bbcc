"""Confluence storage-format HTML to plain text / light Markdown.

Confluence returns page bodies in its *storage* representation, an XHTML
dialect with ``ac:`` / ``ri:`` macro elements.  These helpers are a small
regex pipeline, not a full HTML parser:

* block-closing tags and ``<br>`` become line breaks,
* every remaining tag is stripped,
* the handful of entities Confluence emits for plain text are decoded,
* lines are trimmed and blank lines dropped.

:func:`storage_to_markdown` additionally keeps headings, list items and
inline emphasis as Markdown markers.
"""

from __future__ import annotations

import re

# Closing tags that end a visual block of text.
_BLOCK_END_RE = re.compile(r"</(p|h1|h2|h3|h4|li|tr|div)>", re.IGNORECASE)
_MD_BLOCK_END_RE = re.compile(
    r"</(p|h[1-6]|li|tr|div|pre|blockquote)>", re.IGNORECASE
)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

_HEADING_OPEN_RE = re.compile(r"<h([1-6])(?:\s[^>]*)?>", re.IGNORECASE)
_LIST_ITEM_OPEN_RE = re.compile(r"<li(?:\s[^>]*)?>", re.IGNORECASE)
_STRONG_RE = re.compile(r"</?(strong|b)(?:\s[^>]*)?>", re.IGNORECASE)
_EMPHASIS_RE = re.compile(r"</?(em|i)(?:\s[^>]*)?>", re.IGNORECASE)
_CODE_RE = re.compile(r"</?code(?:\s[^>]*)?>", re.IGNORECASE)

# Order matters: ``&amp;`` is decoded last so that ``&amp;lt;`` stays ``&lt;``.
_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def decode_entities(text: str) -> str:
    """Decode the HTML entities Confluence uses in storage text."""
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _clean_lines(text: str) -> str:
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def storage_to_text(storage_html: str) -> str:
    """Convert storage HTML to plain text.

    Parameters
    ----------
    storage_html:
        The ``body.storage.value`` of a page.

    Returns
    -------
    str
        One line per paragraph, heading, list item or table row; no blank
        lines, no surrounding whitespace.
    """
    with_breaks = _BR_RE.sub("\n", _BLOCK_END_RE.sub("\n", storage_html))
    stripped = _TAG_RE.sub("", with_breaks)
    return _clean_lines(decode_entities(stripped))


def storage_to_markdown(storage_html: str) -> str:
    """Convert storage HTML to lightweight Markdown.

    Headings keep their level as ``#`` prefixes, list items become
    ``- `` bullets, ``strong``/``b`` become ``**``, ``em``/``i`` become
    ``_`` and ``code`` becomes backticks.  Everything else is handled as
    in :func:`storage_to_text`.
    """
    text = _HEADING_OPEN_RE.sub(lambda m: "\n" + "#" * int(m.group(1)) + " ", storage_html)
    text = _LIST_ITEM_OPEN_RE.sub("\n- ", text)
    text = _STRONG_RE.sub("**", text)
    text = _EMPHASIS_RE.sub("_", text)
    text = _CODE_RE.sub("`", text)
    text = _BR_RE.sub("\n", _MD_BLOCK_END_RE.sub("\n", text))
    stripped = _TAG_RE.sub("", text)
    return _clean_lines(decode_entities(stripped))
