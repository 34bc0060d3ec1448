"""Shared fixtures for app-level tests."""
import json
from pathlib import Path

import pytest
from dependency_injector import providers
from fakes import FakeRepoMetadata

from cve2osv.app.container import Container

CURL = "https://github.com/curl/curl"


def feed_document() -> dict:
    """A two-CVE NVD JSON 1.1 feed: one convertible, one rejected."""
    return {
        "CVE_Items": [
            {
                "cve": {
                    "CVE_data_meta": {"ID": "CVE-2022-32221"},
                    "references": {"reference_data": [
                        {"url": "https://github.com/curl/curl/issues/9999", "tags": ["Issue Tracking"]},
                    ]},
                    "description": {"description_data": [{"lang": "en", "value": "curl POST bug"}]},
                },
                "configurations": {"nodes": [{"operator": "OR", "cpe_match": [{
                    "vulnerable": True,
                    "cpe23Uri": "cpe:2.3:a:haxx:curl:*:*:*:*:*:*:*:*",
                    "versionStartIncluding": "7.7",
                    "versionEndExcluding": "7.86.0",
                }]}]},
                "publishedDate": "2022-12-05T22:15Z",
                "lastModifiedDate": "2023-03-01T18:15Z",
            },
            {"cve": {"CVE_data_meta": {"ID": "CVE-2022-0000"}}},
        ],
    }


@pytest.fixture
def feed_file(tmp_path) -> Path:
    fp = tmp_path / "nvdcve-1.1-test.json"
    fp.write_text(json.dumps(feed_document()), encoding="utf-8")
    return fp


@pytest.fixture
def fake_repo_meta() -> FakeRepoMetadata:
    return FakeRepoMetadata(valid=[CURL], tags={CURL: {"7.7": "c77", "7.86.0": "c786"}})


@pytest.fixture
def container_factory(fake_repo_meta):
    """Container with git access replaced by the fake repo metadata."""
    def create_mocked_container():
        container = Container()
        container.repo_meta.override(providers.Object(fake_repo_meta))
        return container
    return create_mocked_container


@pytest.fixture
def mock_container_for_cli(container_factory, monkeypatch):
    """Patch the CLI's Container so conversions never touch the network."""
    monkeypatch.setattr("cve2osv.app.cli.Container", container_factory)


@pytest.fixture
def mock_container_for_main(container_factory, monkeypatch):
    """Same as mock_container_for_cli for the Python facade."""
    monkeypatch.setattr("cve2osv.app.main.Container", container_factory)
