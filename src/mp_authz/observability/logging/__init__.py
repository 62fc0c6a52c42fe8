"""Observability – structured logging helpers."""
from mp_authz.observability.logging.factory import JsonLoggerFactory
from mp_authz.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
