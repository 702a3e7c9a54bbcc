"""Storage-format conversion.

Exports
-------
storage_to_text
    Storage HTML to plain text (one line per block).
storage_to_markdown
    Storage HTML to light Markdown.
"""

from .storage import decode_entities, storage_to_markdown, storage_to_text

__all__ = [
    "decode_entities",
    "storage_to_markdown",
    "storage_to_text",
]
