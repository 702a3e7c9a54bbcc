"""Configuration for confluence-reader.

:class:`ConfluenceReaderConfig` is a dataclass that captures every tuneable
knob: credentials and routing, retry and rate-limit behaviour, tree-fetch
defaults and the diff context width.  Instances are passed to
:class:`~confluence_reader.async_client.AsyncConfluenceReaderClient` and the
transport it owns.

The MCP server builds its configuration from the environment with
:meth:`ConfluenceReaderConfig.from_env`:

* ``CONFLUENCE_TOKEN`` -- scoped API token.  **Required.**
* ``CONFLUENCE_CLOUD_ID`` -- Atlassian cloud id (preferred routing).
* ``CONFLUENCE_BASE_URL`` -- direct tenant URL, e.g.
  ``https://yourtenant.atlassian.net``.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from confluence_reader.errors import ConfluenceReaderConfigError

ENV_TOKEN = "CONFLUENCE_TOKEN"
ENV_CLOUD_ID = "CONFLUENCE_CLOUD_ID"
ENV_BASE_URL = "CONFLUENCE_BASE_URL"

CLOUD_API_ROOT = "https://api.atlassian.com/ex/confluence"
"""Gateway used when routing by cloud id."""

TREE_CONTENT_FORMATS = frozenset({"text", "markdown"})

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})

# (field, minimum, maximum or None)
_BOUNDS: tuple[tuple[str, float, float | None], ...] = (
    ("retry_max_attempts", 1, None),
    ("retry_base_delay", 0, None),
    ("retry_max_delay", 0, None),
    ("children_page_size", 1, 250),
    ("tree_concurrency", 1, None),
    ("tree_max_depth", 0, None),
    ("diff_context_lines", 0, None),
)


def _clean(value: str | None) -> str | None:
    """Strip *value*; blank strings count as unset."""
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class ConfluenceReaderConfig:
    """Complete configuration for a confluence-reader client.

    Parameters
    ----------
    token:
        Scoped Confluence API token, sent as a bearer token.  Never logged.
    cloud_id:
        Atlassian cloud id.  When set, requests are routed through
        ``api.atlassian.com``, which is what scoped tokens expect.
    base_url:
        Direct tenant URL.  Used only when *cloud_id* is not set.
    retry_max_attempts:
        Maximum number of attempts per request for retryable errors.
    retry_base_delay:
        Seconds before the first retry; doubled for each later one.
    retry_max_delay:
        Longest single wait between attempts, in seconds.
    retry_jitter:
        Scale each backoff delay randomly to 50-100 % of its value.
    rate_limit_rps:
        Request rate the shared token bucket holds the client to.
    timeout_seconds:
        Per-request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    children_page_size:
        ``limit`` sent on child-listing requests.
    tree_concurrency:
        Default number of sibling pages fetched in parallel per tree level.
    tree_max_depth:
        Default depth bound for tree fetches.
    diff_context_lines:
        Default number of context lines around each diff hunk.
    tree_content_format:
        How tree nodes render page bodies: ``"text"`` (plain lines) or
        ``"markdown"`` (headings, bullets and inline emphasis kept).
    metrics:
        Optional :class:`~confluence_reader.observability.MetricsHook`.
    debug_dump_payload:
        Write a redacted request/response dump to *stderr*.
    """

    # ── Credentials & routing ──────────────────────────────────────────
    token: str = ""

    cloud_id: str | None = None

    base_url: str | None = None

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 5.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    children_page_size: int = 100

    # ── Tree & diff defaults ────────────────────────────────────────────
    tree_concurrency: int = 5

    tree_max_depth: int = 2

    diff_context_lines: int = 3

    tree_content_format: str = "text"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        if self.base_url:
            self.base_url = self.base_url.rstrip("/")
            host = urlparse(self.base_url).hostname
            if self.base_url.startswith("http://") and host not in _LOCAL_HOSTS:
                raise ValueError(
                    f"Refusing insecure HTTP base_url for {host!r}; the bearer token "
                    "would travel in clear text.  Use https:// (plain http is only "
                    "allowed for localhost)."
                )

        for name, low, high in _BOUNDS:
            value = getattr(self, name)
            if value < low or (high is not None and value > high):
                expected = f">= {low}" if high is None else f"between {low} and {high}"
                raise ValueError(f"{name} must be {expected}, got {value}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.tree_content_format not in TREE_CONTENT_FORMATS:
            raise ValueError(
                f"tree_content_format must be one of {sorted(TREE_CONTENT_FORMATS)}, "
                f"got {self.tree_content_format!r}"
            )
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    @property
    def api_base_url(self) -> str:
        """Root URL for API requests.

        Cloud-id routing wins over a direct tenant URL.

        Raises
        ------
        ConfluenceReaderConfigError
            When neither *cloud_id* nor *base_url* is set.
        """
        if self.cloud_id:
            return f"{CLOUD_API_ROOT}/{self.cloud_id}"
        if self.base_url:
            return self.base_url
        raise ConfluenceReaderConfigError(
            message=f"Set {ENV_CLOUD_ID} or {ENV_BASE_URL}.",
            context={"missing": [ENV_CLOUD_ID, ENV_BASE_URL]},
        )

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> ConfluenceReaderConfig:
        """Build a config from ``CONFLUENCE_*`` environment variables.

        Parameters
        ----------
        environ:
            Mapping to read from.  Defaults to :data:`os.environ`.
        **overrides:
            Extra keyword arguments forwarded to the constructor.
            ``token``, ``cloud_id`` and ``base_url`` take precedence over
            the matching environment variables.

        Raises
        ------
        ConfluenceReaderConfigError
            If the token is missing, or neither routing variable is set.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "token": _clean(env.get(ENV_TOKEN)),
            "cloud_id": _clean(env.get(ENV_CLOUD_ID)),
            "base_url": _clean(env.get(ENV_BASE_URL)),
        }
        for key in values:
            if key in overrides:
                values[key] = overrides.pop(key)

        if not values["token"]:
            raise ConfluenceReaderConfigError(
                message=f"Missing {ENV_TOKEN} env var (scoped API token required).",
                context={"missing": [ENV_TOKEN]},
            )
        if not values["cloud_id"] and not values["base_url"]:
            raise ConfluenceReaderConfigError(
                message=f"Set {ENV_CLOUD_ID} or {ENV_BASE_URL}.",
                context={"missing": [ENV_CLOUD_ID, ENV_BASE_URL]},
            )
        return cls(**values, **overrides)

    def __repr__(self) -> str:
        shown = f"...{self.token[-4:]}" if len(self.token) >= 4 else "****"
        fields = ", ".join(
            f"token='{shown}'" if f.name == "token" else f"{f.name}={getattr(self, f.name)!r}"
            for f in dataclasses.fields(self)
        )
        return f"{type(self).__name__}({fields})"
