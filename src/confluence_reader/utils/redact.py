"""Scrub credentials and bulky page bodies out of debug dumps.

Rules applied by :func:`redact`:

* a value under a key that looks sensitive (``authorization``, ``token``,
  ``cookie`` ...) is masked whole, unless masking the token inside it
  already changed it;
* ``Bearer <credential>`` is masked wherever it appears;
* the configured token is replaced by ``<redacted:...abcd>`` (its last four
  characters) wherever it appears;
* strings longer than 200 characters keep a 200-character preview and a
  ``<truncated:N_chars>`` marker.
"""

from __future__ import annotations

import re
from typing import Any

REDACTED = "<redacted>"

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")
_SENSITIVE_KEY_RE = re.compile(
    r"token|secret|password|credential|authorization|cookie|api[_-]key",
    re.IGNORECASE,
)
_PREVIEW_CHARS = 200


def _token_placeholder(token: str) -> str:
    placeholder = f"<redacted:...{token[-4:]}>" if len(token) >= 4 else REDACTED
    return REDACTED if token in placeholder else placeholder


def _mask(text: str, token: str | None) -> str:
    if token:
        text = text.replace(token, _token_placeholder(token))
    return _BEARER_RE.sub(lambda m: m.group(1) + REDACTED, text)


def _scrub(value: Any, token: str | None, sensitive: bool = False) -> Any:
    if sensitive:
        if isinstance(value, str):
            masked = _mask(value, token)
            return masked if masked != value else REDACTED
        return REDACTED
    if isinstance(value, dict):
        return {
            key: _scrub(item, token, isinstance(key, str) and bool(_SENSITIVE_KEY_RE.search(key)))
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_scrub(item, token) for item in value]
    if isinstance(value, str):
        value = _mask(value, token)
        if len(value) > _PREVIEW_CHARS:
            return f"{value[:_PREVIEW_CHARS]}<truncated:{len(value)}_chars>"
    return value


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a scrubbed copy of *payload*; the input is left untouched.

    >>> redact({"Authorization": "Bearer abc123"})
    {'Authorization': 'Bearer <redacted>'}
    """
    return _scrub(payload, token)
