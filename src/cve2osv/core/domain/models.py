from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .exceptions import MalformedCacheError


@dataclass(frozen=True)
class VendorProduct:
    """CPE vendor/product pair used as the repository cache key.

    An empty product acts as a vendor wildcard in deny lists.
    """
    vendor: str
    product: str

    @classmethod
    def parse(cls, text: str) -> "VendorProduct":
        """Parse the ``vendor:product`` encoding used by snapshot files."""
        parts = text.split(":")
        if len(parts) != 2 or not parts[0]:
            raise MalformedCacheError(f"invalid vendor/product key: {text!r}")
        return cls(vendor=parts[0], product=parts[1])

    def __str__(self) -> str:
        return f"{self.vendor}:{self.product}"


@dataclass(frozen=True)
class CPE:
    part: str
    vendor: str
    product: str
    version: str


@dataclass(frozen=True)
class Reference:
    url: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class CPEMatch:
    """A single ``cpe_match`` entry from an NVD configuration node."""
    criteria: str
    vulnerable: bool = True
    version_start_including: str = ""
    version_start_excluding: str = ""
    version_end_including: str = ""
    version_end_excluding: str = ""


@dataclass(frozen=True)
class CVEItem:
    """Parsed NVD CVE entry.

    Only the fields the conversion needs are kept.
    """
    cve_id: str
    references: tuple[Reference, ...] = ()
    cpe_matches: tuple[CPEMatch, ...] = ()
    descriptions: tuple[str, ...] = ()
    published: str | None = None
    modified: str | None = None

    @property
    def cpes(self) -> list[str]:
        """CPE URIs across all configuration nodes, deduplicated in order."""
        seen: list[str] = []
        for match in self.cpe_matches:
            if match.criteria not in seen:
                seen.append(match.criteria)
        return seen


class CommitKind(str, Enum):
    INTRODUCED = "introduced"
    FIXED = "fixed"
    LAST_AFFECTED = "last_affected"


@dataclass(frozen=True)
class AffectedVersion:
    introduced: str = ""
    fixed: str = ""
    last_affected: str = ""


@dataclass(frozen=True)
class AffectedCommit:
    repo: str
    kind: CommitKind
    commit: str


@dataclass(frozen=True)
class NormalizedTag:
    tag: str
    commit: str


# repo URL -> normalized version -> tag
RepoTagsCache = dict[str, dict[str, NormalizedTag]]


@dataclass
class VersionInfo:
    """Textual version boundaries plus whatever commits they resolved to."""
    affected_versions: list[AffectedVersion] = field(default_factory=list)
    affected_commits: list[AffectedCommit] = field(default_factory=list)

    def has_fixed_versions(self) -> bool:
        return any(av.fixed for av in self.affected_versions)

    def fixed_commits(self, repo: str) -> list[AffectedCommit]:
        return [
            ac for ac in self.affected_commits
            if ac.repo == repo and ac.kind is CommitKind.FIXED
        ]

    def has_fixed_commits(self, repo: str) -> bool:
        return bool(self.fixed_commits(repo))

    def copy(self) -> "VersionInfo":
        return VersionInfo(
            affected_versions=list(self.affected_versions),
            affected_commits=list(self.affected_commits),
        )


class ConversionOutcome(IntEnum):
    """Terminal classification recorded once per processed CVE."""
    UNKNOWN = 0  # Shouldn't happen
    SUCCESSFUL = 1
    REJECTED = 2  # No CPEs and no references
    NO_SOFTWARE = 3  # CPEs present, none for applications
    NO_REPOS = 4  # No repository derivable for the CVE
    NO_RANGES = 5  # No commit ranges survived resolution
    FIX_UNRESOLVABLE = 6  # Fixed versions exist but none resolved to commits

    @property
    def label(self) -> str:
        return _OUTCOME_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "ConversionOutcome":
        for outcome, text in _OUTCOME_LABELS.items():
            if text == label:
                return outcome
        raise ValueError(f"unknown conversion outcome: {label!r}")

    def __str__(self) -> str:
        return self.label


_OUTCOME_LABELS = {
    ConversionOutcome.UNKNOWN: "ConversionUnknown",
    ConversionOutcome.SUCCESSFUL: "Successful",
    ConversionOutcome.REJECTED: "Rejected",
    ConversionOutcome.NO_SOFTWARE: "NoSoftware",
    ConversionOutcome.NO_REPOS: "NoRepos",
    ConversionOutcome.NO_RANGES: "NoRanges",
    ConversionOutcome.FIX_UNRESOLVABLE: "FixUnresolvable",
}


class OutputFormat(str, Enum):
    OSV = "OSV"
    PACKAGE_INFO = "PackageInfo"


@dataclass
class Metrics:
    """Process-wide counters for one conversion run."""
    total_cves: int = 0
    cves_for_applications: int = 0
    cves_for_known_repos: int = 0
    records_generated: int = 0
    outcomes: dict[str, ConversionOutcome] = field(default_factory=dict)


@dataclass
class RunSummary:
    """What is left of the metrics once the outcome map has been flushed."""
    total_cves: int
    cves_for_applications: int
    cves_for_known_repos: int
    records_generated: int
    outcome_counts: dict[str, int]
    outcomes_file: str | None = None
