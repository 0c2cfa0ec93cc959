"""
Prometheus metrics for live reload channels.

Tracks open channels, connection outcomes and broadcast deliveries.
"""

from todo_app.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_gauge,
)

livereload_channels_active = _get_or_create_gauge(
    "livereload_channels_active", "Number of open live reload channels"
)

livereload_connections_total = _get_or_create_counter(
    "livereload_connections_total",
    "Total live reload connections",
    ["freshness"],  # current, stale
)

livereload_messages_sent_total = _get_or_create_counter(
    "livereload_messages_sent_total",
    "Total live reload messages delivered",
    ["message"],
)

livereload_send_failures_total = _get_or_create_counter(
    "livereload_send_failures_total",
    "Total live reload messages that failed to send",
)
