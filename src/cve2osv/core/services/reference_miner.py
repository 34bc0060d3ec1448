from __future__ import annotations

from typing import Iterable, Sequence

from ..domain.exceptions import RepoURLError
from ..domain.models import Reference, VendorProduct
from ..domain.repo_url import repo_from_url
from ..ports import LoggerPort, RepoMetadataPort
from .repo_cache import VendorProductRepoCache
from .scope_filters import ref_acceptable


class ReferenceMiner:
    """Derives candidate repositories for a CVE from its reference URLs."""

    def __init__(self, *, repo_meta: RepoMetadataPort, logger: LoggerPort) -> None:
        self._repo_meta = repo_meta
        self._logger = logger

    def derive_repos(
        self,
        cve_id: str,
        cache: VendorProductRepoCache | None,
        vp: VendorProduct | None,
        references: Sequence[Reference],
        tag_denylist: Iterable[str],
    ) -> list[str]:
        """Return the repositories the references point at, in reference order.

        A cached vendor/product short-circuits mining entirely. The first
        reference carrying a denied tag retracts its own repository (from the
        result and the cache) and ends mining for this vendor/product.
        """
        if cache is not None and vp is not None:
            cached, found = cache.lookup(vp)
            if found:
                return cached

        denied = tuple(tag_denylist)
        repos: list[str] = []
        for ref in references:
            if not ref_acceptable(ref, denied):
                self._retract(cache, vp, ref.url, repos)
                self._logger.info(
                    "reference_denied",
                    cve=cve_id,
                    url=ref.url,
                    vendor_product=str(vp) if vp else None,
                    tags=list(ref.tags),
                )
                break
            try:
                repo = repo_from_url(ref.url)
            except RepoURLError:
                continue
            if repo in repos:
                continue
            if not self._repo_meta.valid_repo(repo):
                self._logger.debug("repo_invalid", cve=cve_id, repo=repo)
                continue
            repos.append(repo)
            if cache is not None:
                cache.add(vp, repo)
        return repos

    def _retract(
        self,
        cache: VendorProductRepoCache | None,
        vp: VendorProduct | None,
        url: str,
        repos: list[str],
    ) -> None:
        candidates = [url]
        try:
            candidates.append(repo_from_url(url))
        except RepoURLError:
            pass
        for candidate in candidates:
            if candidate in repos:
                repos.remove(candidate)
            if cache is not None:
                cache.remove(vp, candidate)
