"""Assembly of OSV and PackageInfo records from resolved version data."""

from __future__ import annotations

from typing import Any

from .models import AffectedCommit, AffectedVersion, CommitKind, CVEItem, VersionInfo

OSV_SCHEMA_VERSION = "1.6.0"

# NVD reference tag -> OSV reference type, first match wins.
REFERENCE_TYPES: tuple[tuple[str, str], ...] = (
    ("Patch", "FIX"),
    ("Vendor Advisory", "ADVISORY"),
    ("Third Party Advisory", "ADVISORY"),
    ("Issue Tracking", "REPORT"),
    ("Mailing List", "DISCUSSION"),
    ("Exploit", "EVIDENCE"),
    ("Release Notes", "WEB"),
)


def reference_type(tags: tuple[str, ...]) -> str:
    for tag, osv_type in REFERENCE_TYPES:
        if tag in tags:
            return osv_type
    return "WEB"


def _commit_event(commit: AffectedCommit) -> dict[str, str]:
    return {commit.kind.value: commit.commit}


def _version_dict(av: AffectedVersion) -> dict[str, str]:
    fields = {"introduced": av.introduced, "fixed": av.fixed, "last_affected": av.last_affected}
    return {k: v for k, v in fields.items() if v}


def git_ranges(versions: VersionInfo) -> list[dict[str, Any]]:
    """Group affected commits into one GIT range per repository.

    A repository with no introduced commit is treated as affected from the
    beginning of history.
    """
    by_repo: dict[str, list[AffectedCommit]] = {}
    for ac in versions.affected_commits:
        by_repo.setdefault(ac.repo, [])
        if ac not in by_repo[ac.repo]:
            by_repo[ac.repo].append(ac)

    ranges = []
    for repo, commits in by_repo.items():
        events = [_commit_event(c) for c in commits if c.kind is CommitKind.INTRODUCED]
        if not events:
            events.append({"introduced": "0"})
        events += [_commit_event(c) for c in commits if c.kind is CommitKind.FIXED]
        events += [_commit_event(c) for c in commits if c.kind is CommitKind.LAST_AFFECTED]
        ranges.append({"type": "GIT", "repo": repo, "events": events})
    return ranges


def build_osv_record(cve: CVEItem, versions: VersionInfo) -> dict[str, Any]:
    record: dict[str, Any] = {
        "schema_version": OSV_SCHEMA_VERSION,
        "id": cve.cve_id,
        "modified": cve.modified or cve.published,
        "published": cve.published,
        "details": cve.descriptions[0] if cve.descriptions else "",
        "references": [
            {"type": reference_type(ref.tags), "url": ref.url} for ref in cve.references
        ],
        "affected": [],
    }

    affected: dict[str, Any] = {"ranges": git_ranges(versions)}
    if versions.affected_versions:
        affected["database_specific"] = {
            "versions": [_version_dict(av) for av in versions.affected_versions]
        }
    record["affected"].append(affected)

    for key in ("modified", "published"):
        if record[key] is None:
            del record[key]
    if not record["references"]:
        del record["references"]
    return record


def osv_ranges(record: dict[str, Any]) -> list[dict[str, Any]]:
    affected = record.get("affected") or [{}]
    return affected[0].get("ranges") or []


def build_package_info(versions: VersionInfo) -> list[dict[str, Any]]:
    """PackageInfo records are consumed as a JSON array, one entry here.

    Textual versions are dropped since the commits now carry that information.
    """
    return [
        {
            "version_info": {
                "affected_commits": [
                    {"repo": ac.repo, ac.kind.value: ac.commit}
                    for ac in versions.affected_commits
                ],
            },
        }
    ]
