from __future__ import annotations

from .cpe import APPLICATION_PART, has_concrete_version, parse_cpe
from .exceptions import CPEParseError
from .models import AffectedCommit, AffectedVersion, CommitKind, CVEItem, VersionInfo
from .repo_url import commit_from_url

PATCH_TAG = "Patch"


def extract_version_info(cve: CVEItem) -> tuple[VersionInfo, list[str]]:
    """Pull textual version ranges and known fix commits out of a CVE.

    Returns the extracted VersionInfo and human-readable notes about
    anything that was skipped or looked odd.
    """
    versions = VersionInfo()
    notes: list[str] = []

    for ref in cve.references:
        if PATCH_TAG not in ref.tags:
            continue
        found = commit_from_url(ref.url)
        if found is None:
            continue
        repo, sha = found
        commit = AffectedCommit(repo=repo, kind=CommitKind.FIXED, commit=sha)
        if commit not in versions.affected_commits:
            versions.affected_commits.append(commit)

    for match in cve.cpe_matches:
        if not match.vulnerable:
            continue

        introduced = match.version_start_including
        if match.version_start_excluding:
            notes.append(
                f"Warning: {match.criteria} sets versionStartExcluding "
                f"({match.version_start_excluding}), treating it as introduced"
            )
            introduced = introduced or match.version_start_excluding
        fixed = match.version_end_excluding
        last_affected = match.version_end_including

        if not (introduced or fixed or last_affected):
            # No range given, fall back to the CPE's own version if it has one.
            try:
                cpe = parse_cpe(match.criteria)
            except CPEParseError as e:
                notes.append(f"Skipping unparseable CPE: {e}")
                continue
            if cpe.part != APPLICATION_PART:
                continue
            if not has_concrete_version(cpe.version):
                notes.append(f"No version information in {match.criteria}")
                continue
            last_affected = cpe.version

        if introduced and fixed and introduced == fixed:
            notes.append(f"Skipping empty range {introduced}..{fixed} from {match.criteria}")
            continue

        av = AffectedVersion(introduced=introduced, fixed=fixed, last_affected=last_affected)
        if av not in versions.affected_versions:
            versions.affected_versions.append(av)

    return versions, notes
