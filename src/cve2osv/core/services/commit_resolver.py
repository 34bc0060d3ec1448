from __future__ import annotations

from typing import Mapping, Sequence

from ..domain.exceptions import TagLookupError, VersionToCommitError
from ..domain.models import CommitKind, NormalizedTag, RepoTagsCache, VersionInfo
from ..ports import LoggerPort, RepoMetadataPort


class CommitResolver:
    """Converts textual version boundaries into commits by treating them as tags.

    Every failure below the level of a whole resolution is logged and skipped:
    a repository whose tags cannot be listed is passed over, and a boundary
    with no matching tag is dropped for that repository.
    """

    def __init__(self, *, repo_meta: RepoMetadataPort, logger: LoggerPort) -> None:
        self._repo_meta = repo_meta
        self._logger = logger

    def resolve(
        self,
        cve_id: str,
        versions: VersionInfo,
        repos: Sequence[str],
        tag_cache: RepoTagsCache,
        notes: list[str] | None = None,
    ) -> VersionInfo:
        """Return a copy of ``versions`` with resolved commits appended.

        Fixed commits already present for a repository (from patch
        references) take precedence: the textual fixed boundary is not
        resolved again and last-affected is skipped, since a range cannot
        carry both.
        """
        result = versions.copy()
        for repo in repos:
            try:
                tags = self._repo_meta.normalize_repo_tags(repo, tag_cache)
            except TagLookupError as e:
                self._logger.warning("tags_unavailable", cve=cve_id, repo=repo, error=str(e))
                continue

            for av in versions.affected_versions:
                if av.introduced:
                    self._convert(cve_id, result, av.introduced, repo, CommitKind.INTRODUCED, tags)

                if result.has_fixed_commits(repo) and av.fixed:
                    fixed = [c.commit for c in result.fixed_commits(repo)]
                    self._logger.info(
                        "fixed_commits_preassumed",
                        cve=cve_id,
                        repo=repo,
                        fixed_version=av.fixed,
                        commits=fixed,
                    )
                    if notes is not None:
                        notes.append(
                            f"Using preassumed fixed commits {fixed} for {repo} "
                            f"instead of deriving from fixed version {av.fixed!r}"
                        )
                elif av.fixed:
                    self._convert(cve_id, result, av.fixed, repo, CommitKind.FIXED, tags)

                if not result.has_fixed_commits(repo) and av.last_affected:
                    self._convert(cve_id, result, av.last_affected, repo, CommitKind.LAST_AFFECTED, tags)
        return result

    def _convert(
        self,
        cve_id: str,
        result: VersionInfo,
        version: str,
        repo: str,
        kind: CommitKind,
        tags: Mapping[str, NormalizedTag],
    ) -> None:
        try:
            commit = self._repo_meta.version_to_commit(version, repo, kind, tags)
        except VersionToCommitError as e:
            self._logger.warning(
                "commit_unresolved",
                cve=cve_id,
                repo=repo,
                kind=kind.value,
                version=version,
                error=str(e),
            )
            return
        self._logger.info(
            "commit_derived",
            cve=cve_id,
            repo=repo,
            kind=kind.value,
            version=version,
            commit=commit.commit,
        )
        if commit not in result.affected_commits:
            result.affected_commits.append(commit)
