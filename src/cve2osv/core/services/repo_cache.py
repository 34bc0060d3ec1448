from __future__ import annotations

from typing import Iterator, Mapping

from ..domain.exceptions import MalformedCacheError
from ..domain.models import VendorProduct


class VendorProductRepoCache:
    """Vendor/product -> candidate repository URLs, shared across a run.

    URLs are kept in first-seen order with no duplicates. An entry whose last
    URL is removed disappears entirely.
    """

    def __init__(self, initial: Mapping[VendorProduct, list[str]] | None = None) -> None:
        self._entries: dict[VendorProduct, list[str]] = {}
        if initial:
            self.load(initial)

    def load(self, mapping: Mapping[VendorProduct, list[str]]) -> None:
        """Bulk preload from a snapshot.

        The snapshot is validated in full before anything is applied, so a
        malformed snapshot leaves the cache untouched.

        Raises:
            MalformedCacheError: If a key is not a VendorProduct or a value is
                not a list of URL strings
        """
        staged: dict[VendorProduct, list[str]] = {}
        for vp, repos in mapping.items():
            if not isinstance(vp, VendorProduct):
                raise MalformedCacheError(f"invalid cache key: {vp!r}")
            if isinstance(repos, str) or not all(isinstance(r, str) for r in repos):
                raise MalformedCacheError(f"invalid repository list for {vp}: {repos!r}")
            deduped: list[str] = []
            for repo in repos:
                if repo not in deduped:
                    deduped.append(repo)
            if deduped:
                staged[vp] = deduped

        for vp, repos in staged.items():
            for repo in repos:
                self.add(vp, repo)

    def lookup(self, vp: VendorProduct | None) -> tuple[list[str], bool]:
        if vp is None or vp not in self._entries:
            return [], False
        return list(self._entries[vp]), True

    def add(self, vp: VendorProduct | None, repo: str) -> None:
        """Append the repo for the vendor/product if not already present."""
        if vp is None:
            return
        repos = self._entries.setdefault(vp, [])
        if repo not in repos:
            repos.append(repo)

    def remove(self, vp: VendorProduct | None, repo: str) -> None:
        """Drop the repo for the vendor/product, deleting emptied entries."""
        if vp is None:
            return
        repos = self._entries.get(vp)
        if repos is None or repo not in repos:
            return
        repos.remove(repo)
        if not repos:
            del self._entries[vp]

    def snapshot(self) -> dict[VendorProduct, list[str]]:
        return {vp: list(repos) for vp, repos in self._entries.items()}

    def __contains__(self, vp: object) -> bool:
        return vp in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[VendorProduct]:
        return iter(self._entries)
