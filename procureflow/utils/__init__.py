"""Utility modules: logging, ids, time, bearer tokens (utils.jwt, imported directly)"""
from .logger import get_logger, setup_logging, get_correlation_id, set_correlation_id
from .idgen import (
    generate_id, generate_request_id, generate_history_entry_id,
    generate_audit_event_id, generate_correlation_id
)
from .time import utc_now, ensure_utc, not_before, format_iso, parse_iso

__all__ = [
    "get_logger",
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "generate_id",
    "generate_request_id",
    "generate_history_entry_id",
    "generate_audit_event_id",
    "generate_correlation_id",
    "utc_now",
    "ensure_utc",
    "not_before",
    "format_iso",
    "parse_iso",
]
