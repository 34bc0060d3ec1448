"""Domain exceptions for cve2osv."""

from __future__ import annotations


class Cve2OsvError(Exception):
    """Base class for all cve2osv errors."""


# Fatal, abort the run.

class FeedError(Cve2OsvError):
    """Raised when the input vulnerability feed cannot be read or parsed."""


class MalformedCacheError(Cve2OsvError):
    """Raised when a vendor/product to repository snapshot is malformed."""


class UnsupportedFormatError(Cve2OsvError):
    """Raised when an output format other than OSV or PackageInfo is requested."""

    def __init__(self, out_format: str) -> None:
        self.out_format = out_format
        super().__init__(f"Unsupported output format: {out_format}")


# Recoverable, logged and skipped.

class CPEParseError(Cve2OsvError):
    pass


class RepoURLError(Cve2OsvError):
    pass


class TagLookupError(Cve2OsvError):
    """Raised when a repository's tags cannot be listed."""


class VersionToCommitError(Cve2OsvError):
    """Raised when a textual version has no matching tag in a repository."""


# Per-CVE terminal.

class ConversionError(Cve2OsvError):
    """Raised when a single CVE cannot be turned into a record."""

    def __init__(self, cve_id: str, message: str) -> None:
        self.cve_id = cve_id
        super().__init__(f"[{cve_id}]: {message}")


class NoRangesError(ConversionError):
    """No affected commit ranges could be determined."""


class UnresolvedFixError(ConversionError):
    """Fixed versions exist but none were resolved to commits."""
