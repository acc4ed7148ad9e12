"""Exception hierarchy for bookfest."""

from typing import Any, Dict, Optional


class BookfestError(Exception):
    """
    Root of every error the pipeline raises on purpose.

    `details` holds short strings (path, failing name, retry count) that the
    walkthrough prints under the message, one `key: value` line each, so a
    learner sees what broke without reading a traceback.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = {k: str(v) for k, v in (details or {}).items()}

    def __str__(self) -> str:
        lines = [self.message]
        lines += [f"  {k}: {v}" for k, v in sorted(self.details.items())]
        return "\n".join(lines)


class DataLoadError(BookfestError):
    """Raised when the events table cannot be read or lacks required columns."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            f"Cannot load events from: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class ExternalLookupError(BookfestError):
    """Raised when the name -> gender service fails or answers garbage.

    ``partial`` carries whatever results were already computed when the
    lookup ran as one step of a longer walkthrough.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, str]] = None,
        partial: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.partial = partial
