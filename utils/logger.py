"""
Logging utility functions and helpers.
"""

import logging
from typing import Any, Dict

# Substrings of keys whose values must never reach the logs in full
SENSITIVE_FIELDS = {
    'password', 'hash', 'token', 'secret', 'api_key', 'authorization', 'cookie'
}


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove credentials from data passed as logging `extra`.

    Token values keep their first 8 characters so a session can still be
    correlated; everything else sensitive is fully redacted.
    """
    sanitized = data.copy()

    for key, value in sanitized.items():
        lowered = key.lower()
        if any(sensitive in lowered for sensitive in SENSITIVE_FIELDS):
            if isinstance(value, str):
                if 'token' in lowered and len(value) > 8:
                    sanitized[key] = f"{value[:8]}..."
                else:
                    sanitized[key] = "***REDACTED***"

        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)

    return sanitized
