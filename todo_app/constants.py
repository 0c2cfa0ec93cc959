"""
Application-level constants for protocol and render behavior.

These values are part of the wire contract with the browser client and
must not be changed via environment variables or configuration.
"""

# ============================================================================
# Live reload protocol
# ============================================================================

# Pushed once on connect when the client's build tag is stale, and whenever
# the client bundle is replaced
RELOAD_MESSAGE = "reload"

# Pushed whenever the stylesheet snapshot is replaced
LOAD_STYLES_MESSAGE = "loadStyles"

LIVERELOAD_PATH = "/livereload/{build_id}"

# Seconds a single channel may take to accept a broadcast message before it
# counts as a failed send
LIVERELOAD_SEND_TIMEOUT = 5.0

# ============================================================================
# Render
# ============================================================================

HTML_CONTENT_TYPE = "text/html"

# Served with status 500 when the streaming render cannot start at all.
# The script path differs from /client.js on purpose (see DESIGN.md).
FALLBACK_BODY = (
    '<!doctype html><p>Loading...</p><script src="clientrender.js"></script>'
)

# Appended to a streamed document when a render error was recorded after
# the status line had already been sent
RENDER_FAILURE_MARKER = '<template data-render-status="500"></template>'

# ============================================================================
# Logging
# ============================================================================

# Correlation IDs are truncated to this length
CORRELATION_ID_LENGTH = 8
