from __future__ import annotations

import re
from typing import Mapping, Optional

from git.cmd import Git
from git.exc import GitCommandError

from ..core.domain.exceptions import TagLookupError, VersionToCommitError
from ..core.domain.models import AffectedCommit, CommitKind, NormalizedTag, RepoTagsCache

_TAG_REF = "refs/tags/"
_PEELED = "^{}"

_VERSION = re.compile(
    r"(?P<main>\d+(?:[._-]\d+)*)"
    r"(?P<suffix>[a-z]+\d*|[._-](?:rc|alpha|beta|pre|dev)[._-]?\d*)?"
)


def _repo_name(repo_url: str) -> str:
    name = repo_url.rstrip("/").rsplit("/", 1)[-1]
    return name[:-4] if name.endswith(".git") else name


def normalize_version(text: str, name: Optional[str] = None) -> Optional[str]:
    """Reduce a tag or version string to a comparable form.

    "v1.2.3", "release-1_2_3" and "foo-1.2.3" (with name="foo") all become
    "1.2.3". Pre-release suffixes are kept without separators ("2.0-rc1" ->
    "2.0rc1"). Returns None when the text holds no digits.
    """
    s = text.strip().lower()
    if name:
        lowered = name.lower()
        if s.startswith(lowered):
            s = s[len(lowered):]
    m = _VERSION.search(s)
    if m is None:
        return None
    main = re.sub(r"[._-]", ".", m.group("main"))
    suffix = re.sub(r"[._-]", "", m.group("suffix") or "")
    return main + suffix


def _strip_zeros(version: str) -> str:
    # 1.2.0.0 and 1.2 name the same release
    while version.endswith(".0"):
        version = version[:-2]
    return version


class GitRepoMetadata:
    """Remote tag lookup through ``git ls-remote``; nothing is cloned."""

    def __init__(self, *, timeout: float = 60.0) -> None:
        self._timeout = timeout
        self._git = Git()
        self._git.update_environment(GIT_TERMINAL_PROMPT="0")
        self._valid: dict[str, bool] = {}

    def _ls_remote(self, *args: str) -> str:
        return self._git.ls_remote(*args, kill_after_timeout=self._timeout)

    def valid_repo(self, repo_url: str) -> bool:
        if repo_url not in self._valid:
            try:
                self._ls_remote(repo_url, "HEAD")
                self._valid[repo_url] = True
            except GitCommandError:
                self._valid[repo_url] = False
        return self._valid[repo_url]

    def list_tags(self, repo_url: str) -> dict[str, str]:
        """Return tag name -> commit, preferring the peeled commit of annotated tags."""
        try:
            out = self._ls_remote("--tags", repo_url)
        except GitCommandError as e:
            raise TagLookupError(f"failed to list tags of {repo_url}: {e.stderr or e}") from e

        tags: dict[str, str] = {}
        peeled: dict[str, str] = {}
        for line in out.splitlines():
            sha, _, ref = line.partition("\t")
            if not ref.startswith(_TAG_REF):
                continue
            tag = ref[len(_TAG_REF):]
            if tag.endswith(_PEELED):
                peeled[tag[: -len(_PEELED)]] = sha
            else:
                tags[tag] = sha
        tags.update(peeled)
        return tags

    def normalize_repo_tags(self, repo_url: str, cache: RepoTagsCache) -> dict[str, NormalizedTag]:
        if repo_url in cache:
            return cache[repo_url]

        name = _repo_name(repo_url)
        normalized: dict[str, NormalizedTag] = {}
        for tag, commit in sorted(self.list_tags(repo_url).items()):
            version = normalize_version(tag, name)
            if version is None or version in normalized:
                continue
            normalized[version] = NormalizedTag(tag=tag, commit=commit)

        cache[repo_url] = normalized
        return normalized

    def version_to_commit(
        self,
        version: str,
        repo_url: str,
        kind: CommitKind,
        tags: Mapping[str, NormalizedTag],
    ) -> AffectedCommit:
        wanted = normalize_version(version)
        if wanted is None:
            raise VersionToCommitError(f"{version!r} is not a version")

        hit = tags.get(wanted)
        if hit is None:
            loose = _strip_zeros(wanted)
            hit = next((t for v, t in tags.items() if _strip_zeros(v) == loose), None)
        if hit is None:
            raise VersionToCommitError(
                f"failed to find a commit for version {version!r} (normalized {wanted!r}) in {repo_url}"
            )
        return AffectedCommit(repo=repo_url, kind=kind, commit=hit.commit)
