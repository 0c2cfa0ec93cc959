"""Custom filters for uvicorn access logging."""

import logging


class ExcludePathsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Requests to paths in `LOG_EXCLUDED_PATHS` (by default /metrics and
    /health) will not appear in uvicorn's access logs.

    Args:
        excluded_paths: Paths to drop; read from settings when omitted.
    """

    def __init__(self, excluded_paths: list[str] | None = None):
        super().__init__()
        if excluded_paths is None:
            from todo_app.settings import app_settings

            excluded_paths = app_settings.LOG_EXCLUDED_PATHS
        self.excluded_paths = list(excluded_paths)

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if the log record should be logged.

        Returns:
            False if the request path is an excluded path, True otherwise.
        """
        # uvicorn access records: (client_addr, method, path, http_version, status)
        if isinstance(record.args, tuple) and len(record.args) >= 3:
            path = str(record.args[2]).split("?", 1)[0]
            return path not in self.excluded_paths

        message = record.getMessage()
        return not any(f" {path} " in message for path in self.excluded_paths)
