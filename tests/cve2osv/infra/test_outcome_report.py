import pytest

from cve2osv.core.domain.models import ConversionOutcome
from cve2osv.infra.outcome_report import OUTCOMES_FILE, OutcomeReport


def test_write_csv(tmp_path):
    report = OutcomeReport(tmp_path)

    fp = report.write(
        {
            "CVE-2022-0001": ConversionOutcome.SUCCESSFUL,
            "CVE-2022-0002": ConversionOutcome.REJECTED,
        },
        {"CVE-2022-0001": ["https://github.com/curl/curl", "https://github.com/curl/curl-www"]},
    )

    assert fp == tmp_path / OUTCOMES_FILE
    assert fp.read_text(encoding="utf-8").splitlines() == [
        "CVE,outcome,repos",
        "CVE-2022-0001,Successful,https://github.com/curl/curl https://github.com/curl/curl-www",
        "CVE-2022-0002,Rejected,",
    ]


def test_read_back(tmp_path):
    report = OutcomeReport(tmp_path)
    report.write({"CVE-1": ConversionOutcome.FIX_UNRESOLVABLE, "CVE-2": ConversionOutcome.NO_REPOS}, {})
    assert OutcomeReport().read(tmp_path) == {
        "CVE-1": ConversionOutcome.FIX_UNRESOLVABLE,
        "CVE-2": ConversionOutcome.NO_REPOS,
    }


def test_empty_report_has_header_only(tmp_path):
    fp = OutcomeReport(tmp_path).write({}, {})
    assert fp.read_text(encoding="utf-8").splitlines() == ["CVE,outcome,repos"]
    assert OutcomeReport().read(tmp_path) == {}


def test_read_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        OutcomeReport().read(tmp_path)


def test_write_requires_directory():
    with pytest.raises(ValueError):
        OutcomeReport().write({}, {})
