"""Exception types for fatal settlement errors."""

from __future__ import annotations


class ActionProcessingError(RuntimeError):
    """Raised when a run reaches a state it must not commit.

    Business failures (outbid, no space, quota exhausted) are never raised;
    they are reported in the results. This is for mutations attempted
    without a passing validation, or references to unknown publishers.
    """

    def __init__(self, message: str, publisher_id: str | None = None):
        self.publisher_id = publisher_id
        if publisher_id:
            message = f"{message} (publisher '{publisher_id}')"
        super().__init__(message)


__all__ = ["ActionProcessingError"]
