"""Observability: structured logging with credential and PII redaction.

Provides standardized logging primitives using structlog.
"""

from carechat.observability.logging import PIIRedactor, get_logger, setup_logging

__all__ = ["PIIRedactor", "get_logger", "setup_logging"]
