"""
Prometheus metrics for the streaming page render.
"""

from todo_app.utils.metrics._helpers import (
    _get_or_create_counter,
    _get_or_create_histogram,
)

page_renders_total = _get_or_create_counter(
    "page_renders_total",
    "Total page renders by final state",
    ["state"],  # complete, stream_error, start_failed, cancelled
)

page_render_first_chunk_seconds = _get_or_create_histogram(
    "page_render_first_chunk_seconds",
    "Time until the first chunk of the page render was produced",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
