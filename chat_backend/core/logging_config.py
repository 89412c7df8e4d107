"""Logging setup and per-request access log."""
import logging
import time

from fastapi import FastAPI, Request

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"

access_logger = logging.getLogger("chat_backend.access")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    root.setLevel(level.upper())


def install_access_log(app: FastAPI) -> None:
    """Log method, path, status and latency for every request."""

    def _log(request: Request, status_code: int, started: float) -> None:
        access_logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            status_code,
            (time.perf_counter() - started) * 1000,
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The generic handler sits outside this middleware and answers 500
            _log(request, 500, started)
            raise
        _log(request, response.status_code, started)
        return response
