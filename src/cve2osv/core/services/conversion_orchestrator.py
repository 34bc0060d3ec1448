from __future__ import annotations

from typing import Iterable

from ..domain.cpe import APPLICATION_PART, parse_cpe
from ..domain.exceptions import ConversionError, CPEParseError
from ..domain.models import ConversionOutcome, CVEItem, Metrics, RepoTagsCache, VendorProduct
from ..domain.versions import extract_version_info
from ..ports import LoggerPort
from .commit_resolver import CommitResolver
from .outcome_classifier import CVEFacts, OutcomeClassifier
from .record_emitter import RecordEmitter
from .reference_miner import ReferenceMiner
from .repo_cache import VendorProductRepoCache
from .scope_filters import REF_TAG_DENYLIST, VendorProductDenyList


def _extend_unique(target: list[str], repos: Iterable[str]) -> None:
    for repo in repos:
        if repo not in target:
            target.append(repo)


class ConversionOrchestrator:
    """Runs one CVE at a time through repository derivation, resolution and emission.

    Holds the run's metrics and the repositories derived for each CVE. Per-CVE
    failures are classified and logged, never raised.
    """

    def __init__(
        self,
        *,
        cache: VendorProductRepoCache,
        miner: ReferenceMiner,
        resolver: CommitResolver,
        emitter: RecordEmitter,
        classifier: OutcomeClassifier,
        logger: LoggerPort,
        vp_denylist: VendorProductDenyList | None = None,
        ref_tag_denylist: Iterable[str] = REF_TAG_DENYLIST,
    ) -> None:
        self._cache = cache
        self._miner = miner
        self._resolver = resolver
        self._emitter = emitter
        self._classifier = classifier
        self._logger = logger
        self._vp_denylist = vp_denylist or VendorProductDenyList()
        self._ref_tag_denylist = tuple(ref_tag_denylist)
        self._tag_cache: RepoTagsCache = {}

        self.metrics = Metrics()
        self.repos_for_cve: dict[str, list[str]] = {}

    def process(self, cve: CVEItem) -> ConversionOutcome:
        cve_id = cve.cve_id
        if cve_id in self.metrics.outcomes:
            self._logger.warning("cve_duplicate", cve=cve_id)
            return self.metrics.outcomes[cve_id]

        self.metrics.total_cves += 1
        outcome = self._process(cve)
        self.metrics.outcomes[cve_id] = outcome
        return outcome

    def _process(self, cve: CVEItem) -> ConversionOutcome:
        cve_id = cve.cve_id
        refs = cve.references
        cpes = cve.cpes
        facts = CVEFacts(cve_id=cve_id, reference_count=len(refs), cpe_count=len(cpes))

        outcome = self._classifier.classify(facts)
        if outcome is not None:
            self._logger.info("cve_skipped", cve=cve_id, outcome=outcome.label)
            return outcome

        repos: list[str] = []

        # No CPEs, but perhaps usable references.
        if refs and not cpes:
            derived = self._miner.derive_repos(cve_id, None, None, refs, self._ref_tag_denylist)
            if derived:
                self._logger.info("repos_derived", cve=cve_id, repos=derived, source="references")
            else:
                self._logger.warning("repos_not_derived", cve=cve_id, reason="no CPEs")
            _extend_unique(repos, derived)

        facts.app_cpe_count = 0
        app_vps: list[VendorProduct] = []
        for cpe_str in cpes:
            try:
                cpe = parse_cpe(cpe_str)
            except CPEParseError as e:
                self._logger.warning("cpe_unparseable", cve=cve_id, cpe=cpe_str, error=str(e))
                continue
            vp = VendorProduct(cpe.vendor, cpe.product)
            if cpe.part == APPLICATION_PART:
                facts.app_cpe_count += 1
                if vp not in app_vps:
                    app_vps.append(vp)
            cached, found = self._cache.lookup(vp)
            if found:
                self._logger.info("repos_derived", cve=cve_id, repos=cached, vendor_product=str(vp), source="cache")
                _extend_unique(repos, cached)

        outcome = self._classifier.classify(facts)
        if outcome is not None:
            self._logger.info("cve_skipped", cve=cve_id, outcome=outcome.label)
            return outcome

        if facts.app_cpe_count > 0:
            self.metrics.cves_for_applications += 1

        # Nothing from the cache, try the references per application vendor/product.
        if not repos and refs:
            for vp in app_vps:
                if self._vp_denylist.is_denied(vp):
                    self._logger.debug("vendor_product_denied", cve=cve_id, vendor_product=str(vp))
                    continue
                derived = self._miner.derive_repos(cve_id, self._cache, vp, refs, self._ref_tag_denylist)
                if not derived:
                    self._logger.warning("repos_not_derived", cve=cve_id, vendor_product=str(vp))
                    continue
                self._logger.info("repos_derived", cve=cve_id, repos=derived, vendor_product=str(vp), source="references")
                _extend_unique(repos, derived)

        self._logger.info(
            "cve_summary",
            cve=cve_id,
            cpes=len(cpes),
            app_cpes=facts.app_cpe_count,
            derived_repos=len(repos),
        )

        if repos:
            self.repos_for_cve[cve_id] = repos
        facts.repos = repos
        outcome = self._classifier.classify(facts)
        if outcome is not None:
            self._logger.info("cve_skipped", cve=cve_id, outcome=outcome.label)
            return outcome

        self.metrics.cves_for_known_repos += 1

        versions, notes = extract_version_info(cve)
        if versions.affected_versions:
            self._logger.info(
                "resolving_versions",
                cve=cve_id,
                versions=[vars(av) for av in versions.affected_versions],
                repos=repos,
            )
            versions = self._resolver.resolve(cve_id, versions, repos, self._tag_cache, notes)
        facts.versions = versions
        facts.notes = notes

        try:
            self._emitter.emit(cve, facts)
        except (ConversionError, OSError) as e:
            outcome = self._classifier.outcome_for_error(e)
            self._logger.warning("record_not_generated", cve=cve_id, outcome=outcome.label, error=str(e))
            return outcome

        self.metrics.records_generated += 1
        return ConversionOutcome.SUCCESSFUL
