from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol

from .domain.models import (
    AffectedCommit,
    CommitKind,
    ConversionOutcome,
    CVEItem,
    NormalizedTag,
    RepoTagsCache,
    VendorProduct,
)


class FeedPort(Protocol):
    """Port for reading the input vulnerability feed."""

    def load(self, path: Path) -> list[CVEItem]:
        """Load every CVE in the feed, in file order.

        Raises:
            FeedError: If the file cannot be read or parsed
        """
        ...


class RepoMapLoaderPort(Protocol):
    """Port for reading a preloaded vendor/product to repository snapshot."""

    def load(self, path: Path) -> dict[VendorProduct, list[str]]:
        """Raises MalformedCacheError on any malformation."""
        ...


class RepoMetadataPort(Protocol):
    """Port for repository tag listing and version-to-commit lookup.

    Failures are reported through exceptions and are never fatal to a run.
    """

    def valid_repo(self, repo_url: str) -> bool:
        ...

    def normalize_repo_tags(self, repo_url: str, cache: RepoTagsCache) -> dict[str, NormalizedTag]:
        """Return normalized version -> tag for the repository.

        Raises:
            TagLookupError: If the repository's tags cannot be listed
        """
        ...

    def version_to_commit(
        self,
        version: str,
        repo_url: str,
        kind: CommitKind,
        tags: Mapping[str, NormalizedTag],
    ) -> AffectedCommit:
        """Raises VersionToCommitError when no tag matches the version."""
        ...


class RecordWriterPort(Protocol):
    """Port for persisting generated records and their notes."""

    def write_record(self, *, vendor: str, product: str, filename: str, payload: Any) -> Path:
        ...

    def write_notes(self, *, vendor: str, product: str, filename: str, notes: list[str]) -> Path | None:
        ...


class OutcomeReportPort(Protocol):
    """Port for the per-run outcomes summary."""

    def write(
        self,
        outcomes: Mapping[str, ConversionOutcome],
        repos_for_cve: Mapping[str, list[str]],
    ) -> Path:
        ...

    def read(self, out_dir: Path) -> dict[str, ConversionOutcome]:
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Messages are event names; keyword arguments become structured fields.
    """

    def debug(self, message: str, **kwargs: Any) -> None:
        ...

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        ...

    def exception(self, message: str, **kwargs: Any) -> None:
        ...
