"""
Core types shared across oauthflow modules.

Keeps the error classification enum in one canonical place so that errors,
transports and logging compare the same enum members.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    oauthflow never retries on its own; the category tells the caller whether
    a retry could help.

    Categories:
        TRANSIENT: Temporary failures where a later retry may succeed
                   (e.g., network timeouts, 429/503 responses)
        AUTH: Authorization failures requiring user interaction or new
              credentials (e.g., 401, provider "access_denied")
        PERMANENT: Failures that won't succeed on retry
                   (e.g., missing token fields, bad configuration)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


__all__ = ["ErrorCategory"]
