# ===== IMPORTS & DEPENDENCIES =====
from typing import List, Optional


# ===== ERROR TYPES =====
class CatalogError(RuntimeError):
    """Base class for every error raised by the catalog service."""


class SourceUnavailable(CatalogError):
    """Raised when one adapter cannot deliver its payload (network, status, timeout or JSON)."""

    def __init__(self, source: str, cause: Optional[BaseException] = None, detail: Optional[str] = None):
        self.source = source
        self.cause = cause
        reason = detail or (f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error")
        super().__init__(f"Source '{source}' unavailable: {reason}")


class MalformedRecord(CatalogError):
    """Raised by an adapter's mapping function for a single unusable record."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed record from '{source}': {reason}")


class CatalogUnavailable(CatalogError):
    """Raised by refresh() when every configured adapter failed during a pass."""

    def __init__(self, failures: List[SourceUnavailable]):
        self.failures = list(failures)
        sources = ", ".join(f.source for f in self.failures) or "no sources configured"
        super().__init__(f"Catalog unavailable: all sources failed ({sources})")


class AlreadyInProgress(CatalogError):
    """Raised by refresh() when a pass is already fetching."""

    def __init__(self):
        super().__init__("A catalog refresh is already in progress")
