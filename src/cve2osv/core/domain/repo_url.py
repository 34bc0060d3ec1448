from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

from .exceptions import RepoURLError

# Hosts where the repository is always the first two path segments.
FORGE_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")

# GitHub first path segments that are never an owner.
_NON_REPO_OWNERS = {"advisories", "security", "orgs", "topics", "sponsors", "marketplace", "features"}

_COMMIT_PATH = re.compile(r"^(?P<base>.+?)/-?/?commits?/(?P<sha>[0-9a-fA-F]{7,40})/?$")
_COMMIT_QUERY_SHA = re.compile(r"^[0-9a-fA-F]{7,40}$")


def _strip_git_suffix(name: str) -> str:
    return name[:-4] if name.endswith(".git") else name


def repo_from_url(url: str) -> str:
    """Reduce a reference URL to the URL of the repository it points into.

    Raises:
        RepoURLError: If the URL does not identify a repository
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https", "git") or not parsed.hostname:
        raise RepoURLError(f"not a repository URL: {url!r}")
    host = parsed.hostname.lower()
    segments = [s for s in parsed.path.split("/") if s]

    if host.startswith("www."):
        host = host[4:]

    if host in FORGE_HOSTS:
        if len(segments) < 2 or segments[0].lower() in _NON_REPO_OWNERS:
            raise RepoURLError(f"no owner/name in {url!r}")
        owner, name = segments[0], _strip_git_suffix(segments[1])
        if not name:
            raise RepoURLError(f"no repository name in {url!r}")
        return f"https://{host}/{owner}/{name}"

    # gitweb: https://git.example.org/?p=project.git;a=commit;h=<sha>
    if parsed.query:
        query = parse_qs(parsed.query.replace(";", "&"))
        projects = query.get("p")
        if projects and projects[0].endswith(".git"):
            base = f"{parsed.scheme}://{parsed.netloc}{parsed.path.rstrip('/')}"
            return f"{base}/{projects[0]}"

    # cgit and friends: https://git.example.org/project.git/commit/?id=<sha>
    path = parsed.path.rstrip("/")
    if path.endswith("/commit") and parsed.query:
        ids = parse_qs(parsed.query).get("id")
        if ids and _COMMIT_QUERY_SHA.match(ids[0]):
            return f"{parsed.scheme}://{parsed.netloc}{path[: -len('/commit')]}"

    match = _COMMIT_PATH.match(path)
    if match and match.group("base"):
        base = match.group("base").rstrip("/-")
        if base:
            return f"{parsed.scheme}://{parsed.netloc}{base}"

    if path.endswith(".git"):
        return f"{parsed.scheme}://{parsed.netloc}{path}"

    raise RepoURLError(f"unrecognised repository URL: {url!r}")


def commit_from_url(url: str) -> tuple[str, str] | None:
    """Return ``(repo, sha)`` when the URL points at a single commit."""
    parsed = urlparse(url.strip())
    path = parsed.path.rstrip("/")
    sha = None
    match = _COMMIT_PATH.match(path)
    if match:
        sha = match.group("sha")
    elif path.endswith("/commit") and parsed.query:
        ids = parse_qs(parsed.query).get("id")
        if ids and _COMMIT_QUERY_SHA.match(ids[0]):
            sha = ids[0]
    if sha is None:
        return None
    try:
        repo = repo_from_url(url)
    except RepoURLError:
        return None
    return repo, sha.lower()
