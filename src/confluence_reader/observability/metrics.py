"""Pluggable metrics.

The transport and the tree fetcher report counters and timings through a
:class:`MetricsHook`.  Nothing is recorded unless a hook is passed as
``ConfluenceReaderConfig(metrics=...)``; a StatsD or Prometheus adapter
only needs the two methods below.

Names reported:

=============================================  =======
``confluence_reader.requests_total``           counter
``confluence_reader.retries_total``            counter
``confluence_reader.rate_limited_total``       counter
``confluence_reader.request_duration_ms``      timing
``confluence_reader.rate_limit_wait_ms``       timing
``confluence_reader.tree_nodes_total``         counter
``confluence_reader.tree_node_failures_total`` counter
``confluence_reader.tree_fetch_duration_ms``   timing
=============================================  =======

Request metrics are tagged with ``method`` and ``status``; retries with
``reason`` (``rate_limited``, ``server_error`` or ``network_error``).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

Tags = dict[str, str]


@runtime_checkable
class MetricsHook(Protocol):
    """Anything with ``increment`` and ``timing`` can receive metrics."""

    def increment(self, name: str, value: int = 1, tags: Tags | None = None) -> None: ...

    def timing(self, name: str, ms: float, tags: Tags | None = None) -> None: ...


class NoopMetricsHook:
    """Default hook; drops everything."""

    __slots__ = ()

    def increment(self, name: str, value: int = 1, tags: Tags | None = None) -> None:
        return None

    def timing(self, name: str, ms: float, tags: Tags | None = None) -> None:
        return None
