"""Tests for the convert and outcomes use cases."""
from pathlib import Path

import pytest
from fakes import FakeRepoMetadata, MemoryOutcomeReport, MemoryRecordWriter, RecordingLogger

from cve2osv.core.domain.exceptions import FeedError
from cve2osv.core.domain.models import (
    ConversionOutcome,
    CPEMatch,
    CVEItem,
    Reference,
    VendorProduct,
)
from cve2osv.core.services import (
    CommitResolver,
    ConversionOrchestrator,
    OutcomeClassifier,
    RecordEmitter,
    ReferenceMiner,
    VendorProductRepoCache,
)
from cve2osv.core.usecases.convert import ConvertUseCase
from cve2osv.core.usecases.outcomes import OutcomesUseCase

CURL = "https://github.com/curl/curl"


class FakeFeed:
    def __init__(self, items):
        self.items = items

    def load(self, path):
        if self.items is None:
            raise FeedError(f"failed to open {path}")
        return list(self.items)


class FakeRepoMapLoader:
    def __init__(self, mapping):
        self.mapping = mapping
        self.loaded: list[Path] = []

    def load(self, path):
        self.loaded.append(path)
        return self.mapping


def _feed_items():
    return [
        CVEItem(cve_id="CVE-2022-0001"),
        CVEItem(
            cve_id="CVE-2022-0002",
            references=(Reference("https://curl.se/docs/CVE-2022-0002.html", ()),),
            cpe_matches=(CPEMatch("cpe:2.3:a:haxx:curl:*:*:*:*:*:*:*:*", version_end_excluding="2.0"),),
        ),
        CVEItem(
            cve_id="CVE-2022-0003",
            references=(Reference("https://example.org", ()),),
            cpe_matches=(CPEMatch("cpe:2.3:h:acme:router:-:*:*:*:*:*:*:*"),),
        ),
    ]


def _use_case(items, mapping=None):
    meta = FakeRepoMetadata(valid=[CURL], tags={CURL: {"2.0": "c20"}})
    logger = RecordingLogger()
    cache = VendorProductRepoCache()
    classifier = OutcomeClassifier()
    orchestrator = ConversionOrchestrator(
        cache=cache,
        miner=ReferenceMiner(repo_meta=meta, logger=logger),
        resolver=CommitResolver(repo_meta=meta, logger=logger),
        emitter=RecordEmitter(writer=MemoryRecordWriter(), classifier=classifier, logger=logger),
        classifier=classifier,
        logger=logger,
    )
    report = MemoryOutcomeReport()
    loader = FakeRepoMapLoader(mapping or {})
    uc = ConvertUseCase(
        feed=FakeFeed(items),
        repo_map_loader=loader,
        cache=cache,
        orchestrator=orchestrator,
        report=report,
        logger=logger,
    )
    return uc, orchestrator, report, loader, logger


def test_convert_processes_every_cve_and_writes_report():
    uc, orchestrator, report, loader, logger = _use_case(
        _feed_items(), mapping={VendorProduct("haxx", "curl"): [CURL]},
    )

    summary = uc.execute(nvd_json=Path("nvdcve.json"), cpe_repos=Path("cpe_repos.json"))

    assert loader.loaded == [Path("cpe_repos.json")]
    assert summary.total_cves == 3
    assert summary.records_generated == 1
    assert summary.outcome_counts == {"Rejected": 1, "Successful": 1, "NoSoftware": 1}
    outcomes, repos = report.written
    assert outcomes["CVE-2022-0002"] is ConversionOutcome.SUCCESSFUL
    assert repos == {"CVE-2022-0002": [CURL]}
    # the per-CVE map is flushed after reporting
    assert orchestrator.metrics.outcomes == {}
    assert logger.events("run_metrics")[0]["total_cves"] == 3


def test_convert_without_snapshot_does_not_load_one():
    uc, _, _, loader, _ = _use_case([])
    summary = uc.execute(nvd_json=Path("empty.json"))
    assert loader.loaded == []
    assert summary.total_cves == 0
    assert summary.outcome_counts == {}


def test_convert_feed_error_is_fatal():
    uc, _, report, _, _ = _use_case(None)
    with pytest.raises(FeedError):
        uc.execute(nvd_json=Path("missing.json"))
    assert report.written is None


def test_outcomes_counts_in_enum_order():
    report = MemoryOutcomeReport(stored={
        "CVE-1": ConversionOutcome.NO_REPOS,
        "CVE-2": ConversionOutcome.SUCCESSFUL,
        "CVE-3": ConversionOutcome.NO_REPOS,
    })
    counts = OutcomesUseCase(report=report).execute(Path("out"))
    assert list(counts.items()) == [("Successful", 1), ("NoRepos", 2)]


def test_outcomes_without_report():
    with pytest.raises(FileNotFoundError):
        OutcomesUseCase(report=MemoryOutcomeReport()).execute(Path("out"))
