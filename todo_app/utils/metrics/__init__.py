"""
Prometheus metrics definitions.

Metrics are organized into submodules by subsystem and re-exported here:

    from todo_app.utils.metrics import livereload_channels_active
"""

from todo_app.utils.metrics.livereload import (
    livereload_channels_active,
    livereload_connections_total,
    livereload_messages_sent_total,
    livereload_send_failures_total,
)
from todo_app.utils.metrics.render import (
    page_render_first_chunk_seconds,
    page_renders_total,
)

__all__ = [
    "livereload_channels_active",
    "livereload_connections_total",
    "livereload_messages_sent_total",
    "livereload_send_failures_total",
    "page_render_first_chunk_seconds",
    "page_renders_total",
]
