"""Coarse classification of provider failures.

Used by both the prober and the fallback sequencer so a status check and a
generate call report the same failure the same way.
"""

import asyncio
from enum import Enum
from typing import List, Tuple, Union


class ErrorKind(str, Enum):
    """Error taxonomy for failed provider attempts."""
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    CONNECTION_FAILURE = "connection_failure"
    UNKNOWN = "unknown"


# Evaluated top to bottom, first match wins. Authentication precedes
# RateLimited, so "429 ... 401" is an authentication failure.
CLASSIFICATION_RULES: List[Tuple[Tuple[str, ...], ErrorKind]] = [
    (
        ("401", "unauthorized", "invalid api", "authentication", "api key", "not authorized"),
        ErrorKind.AUTHENTICATION,
    ),
    (("404", "not found"), ErrorKind.NOT_FOUND),
    (("429", "rate limit"), ErrorKind.RATE_LIMITED),
    (
        ("timeout", "timed out", "econnrefused", "connection refused", "connection error",
         "cannot connect"),
        ErrorKind.CONNECTION_FAILURE,
    ),
]

ERROR_DESCRIPTIONS = {
    ErrorKind.AUTHENTICATION: "Invalid API key or authentication failed",
    ErrorKind.NOT_FOUND: "Model or endpoint not found",
    ErrorKind.RATE_LIMITED: "Rate limit exceeded",
    ErrorKind.CONNECTION_FAILURE: "Connection failed - service may be down",
}


def error_message(error: Union[BaseException, str, None]) -> str:
    """Raw message text for an exception or string."""
    if error is None:
        return ""
    if isinstance(error, str):
        return error
    if isinstance(error, asyncio.TimeoutError) and not str(error):
        return "Request timed out"
    return str(error) or type(error).__name__


def classify_error(error: Union[BaseException, str, None]) -> ErrorKind:
    """Classify a raw error by case-insensitive substring matching."""
    message = error_message(error).lower()
    for patterns, kind in CLASSIFICATION_RULES:
        if any(pattern in message for pattern in patterns):
            return kind
    return ErrorKind.UNKNOWN


def describe_error(kind: ErrorKind, raw_message: str) -> str:
    """User-facing text for a classified error; Unknown passes the raw text through."""
    return ERROR_DESCRIPTIONS.get(kind, raw_message)


def is_authenticated_despite_failure(kind: ErrorKind) -> bool:
    """A rate-limited call still proves the credentials were accepted."""
    return kind is ErrorKind.RATE_LIMITED
