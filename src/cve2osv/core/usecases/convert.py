from __future__ import annotations

from collections import Counter
from pathlib import Path

from ..domain.models import RunSummary
from ..ports import FeedPort, LoggerPort, OutcomeReportPort, RepoMapLoaderPort
from ..services import ConversionOrchestrator, VendorProductRepoCache


class ConvertUseCase:
    """Batch conversion of an NVD feed into OSV or PackageInfo records.

    Feed and snapshot problems are fatal and propagate; everything per-CVE is
    handled by the orchestrator.
    """

    def __init__(
        self,
        *,
        feed: FeedPort,
        repo_map_loader: RepoMapLoaderPort,
        cache: VendorProductRepoCache,
        orchestrator: ConversionOrchestrator,
        report: OutcomeReportPort,
        logger: LoggerPort,
    ) -> None:
        self._feed = feed
        self._repo_map_loader = repo_map_loader
        self._cache = cache
        self._orchestrator = orchestrator
        self._report = report
        self._logger = logger

    def execute(self, *, nvd_json: Path, cpe_repos: Path | None = None) -> RunSummary:
        """Convert every CVE in the feed.

        Args:
            nvd_json: NVD CVE JSON feed to convert
            cpe_repos: Optional vendor/product to repository snapshot to preload

        Returns:
            Summary counters for the run

        Raises:
            FeedError: If the feed cannot be read or parsed
            MalformedCacheError: If the snapshot is malformed
        """
        items = self._feed.load(nvd_json)

        if cpe_repos is not None:
            self._cache.load(self._repo_map_loader.load(cpe_repos))
            self._logger.info("cache_preloaded", entries=len(self._cache), path=str(cpe_repos))

        self._logger.info("run_started", feed=str(nvd_json), cves=len(items))
        for cve in items:
            self._orchestrator.process(cve)

        metrics = self._orchestrator.metrics
        outcomes_file: Path | None = None
        try:
            outcomes_file = self._report.write(metrics.outcomes, self._orchestrator.repos_for_cve)
        except OSError as e:
            self._logger.error("outcomes_not_written", error=str(e))

        summary = RunSummary(
            total_cves=metrics.total_cves,
            cves_for_applications=metrics.cves_for_applications,
            cves_for_known_repos=metrics.cves_for_known_repos,
            records_generated=metrics.records_generated,
            outcome_counts=dict(Counter(o.label for o in metrics.outcomes.values())),
            outcomes_file=str(outcomes_file) if outcomes_file else None,
        )
        # The per-CVE map is too large to log, so it is dropped once written.
        metrics.outcomes.clear()

        self._logger.info(
            "run_metrics",
            feed=nvd_json.name,
            total_cves=summary.total_cves,
            cves_for_applications=summary.cves_for_applications,
            cves_for_known_repos=summary.cves_for_known_repos,
            records_generated=summary.records_generated,
            outcome_counts=summary.outcome_counts,
        )
        return summary
