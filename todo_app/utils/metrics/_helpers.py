"""
Get-or-create wrappers for metric registration.

Modules defining metrics can be imported more than once in a process
(uvicorn --reload, tests building several applications). Registering the
same name twice raises in prometheus_client, so an existing collector is
returned instead.
"""

from typing import TypeVar

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram
from prometheus_client.metrics import MetricWrapperBase

MetricT = TypeVar("MetricT", bound=MetricWrapperBase)


def _get_or_create(
    metric_cls: type[MetricT],
    name: str,
    doc: str,
    labels: list[str] | None = None,
    registry: CollectorRegistry = REGISTRY,
    **kwargs,
) -> MetricT:
    existing = registry._names_to_collectors.get(name)
    if existing is not None:
        return existing
    return metric_cls(name, doc, labels or [], registry=registry, **kwargs)


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    return _get_or_create(Counter, name, doc, labels)


def _get_or_create_gauge(
    name: str, doc: str, labels: list[str] | None = None
) -> Gauge:
    return _get_or_create(Gauge, name, doc, labels)


def _get_or_create_histogram(
    name: str,
    doc: str,
    labels: list[str] | None = None,
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    """
    Args:
        buckets: Upper bounds; prometheus_client defaults when omitted.
    """
    if buckets:
        return _get_or_create(Histogram, name, doc, labels, buckets=buckets)
    return _get_or_create(Histogram, name, doc, labels)
