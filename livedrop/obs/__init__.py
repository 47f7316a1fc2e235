"""Observability helpers."""

from .logging import JsonFormatter, configure_logging, stream_id_ctx  # re-export

__all__ = ["JsonFormatter", "configure_logging", "stream_id_ctx"]
