from pathlib import Path

import pytest
from fakes import MemoryRecordWriter, RecordingLogger

from cve2osv.core.domain.exceptions import ConversionError, NoRangesError, UnresolvedFixError
from cve2osv.core.domain.models import (
    AffectedCommit,
    AffectedVersion,
    CommitKind,
    CPEMatch,
    CVEItem,
    OutputFormat,
    VersionInfo,
)
from cve2osv.core.services import CVEFacts, OutcomeClassifier, RecordEmitter

REPO = "https://github.com/curl/curl"


def _cve(cpe="cpe:2.3:a:haxx:curl:*:*:*:*:*:*:*:*"):
    return CVEItem(
        cve_id="CVE-2022-0001",
        cpe_matches=(CPEMatch(cpe, version_end_excluding="7.83.1"),) if cpe else (),
        descriptions=("curl bug",),
    )


def _facts(commits=True, notes=()):
    versions = VersionInfo(affected_versions=[AffectedVersion(fixed="7.83.1")])
    if commits:
        versions.affected_commits.append(AffectedCommit(REPO, CommitKind.FIXED, "c1"))
    return CVEFacts(
        "CVE-2022-0001", reference_count=1, cpe_count=1, app_cpe_count=1,
        repos=[REPO], versions=versions, notes=list(notes),
    )


def _emitter(out_format=OutputFormat.OSV):
    writer = MemoryRecordWriter()
    logger = RecordingLogger()
    emitter = RecordEmitter(writer=writer, classifier=OutcomeClassifier(), logger=logger, out_format=out_format)
    return emitter, writer, logger


def test_emits_osv_record_under_vendor_product():
    emitter, writer, logger = _emitter()

    emitted = emitter.emit(_cve(), _facts(notes=["a note"]))

    assert emitted.record_path == Path("haxx/curl/CVE-2022-0001.json")
    assert emitted.notes_path == Path("haxx/curl/CVE-2022-0001.notes")
    record = writer.records[emitted.record_path]
    assert record["id"] == "CVE-2022-0001"
    assert record["affected"][0]["ranges"][0]["repo"] == REPO
    assert writer.notes[emitted.notes_path] == ["a note"]
    assert logger.events("record_generated")[0]["format"] == "OSV"


def test_no_notes_file_without_notes():
    emitter, writer, _ = _emitter()
    emitted = emitter.emit(_cve(), _facts())
    assert emitted.notes_path is None
    assert writer.notes == {}


def test_emits_package_info_without_textual_versions():
    emitter, writer, _ = _emitter(OutputFormat.PACKAGE_INFO)

    emitted = emitter.emit(_cve(), _facts())

    assert emitted.record_path == Path("haxx/curl/CVE-2022-0001.nvd.json")
    assert writer.records[emitted.record_path] == [
        {"version_info": {"affected_commits": [{"repo": REPO, "fixed": "c1"}]}}
    ]


def test_placeholder_directory_without_cpes():
    emitter, _, _ = _emitter()
    emitted = emitter.emit(_cve(cpe=None), _facts())
    assert emitted.record_path == Path("ENOCPE/ENOCPE/CVE-2022-0001.json")


def test_unresolved_fix_is_raised_before_writing():
    emitter, writer, _ = _emitter()
    with pytest.raises(UnresolvedFixError):
        emitter.emit(_cve(), _facts(commits=False))
    assert writer.records == {}


def test_no_ranges_without_commits():
    emitter, writer, _ = _emitter()
    facts = _facts(commits=False)
    facts.versions = VersionInfo()
    with pytest.raises(NoRangesError):
        emitter.emit(_cve(), facts)
    assert writer.records == {}


def test_unparseable_first_cpe():
    emitter, _, _ = _emitter()
    with pytest.raises(ConversionError):
        emitter.emit(_cve(cpe="garbage"), _facts())


class NotesFailingWriter(MemoryRecordWriter):
    def write_notes(self, *, vendor, product, filename, notes):
        raise OSError("disk full")


def test_notes_failure_keeps_the_record():
    writer = NotesFailingWriter()
    logger = RecordingLogger()
    emitter = RecordEmitter(writer=writer, classifier=OutcomeClassifier(), logger=logger)

    emitted = emitter.emit(_cve(), _facts(notes=["a note"]))

    assert emitted.record_path in writer.records
    assert emitted.notes_path is None
    assert logger.events("notes_not_written")[0]["error"] == "disk full"
    assert logger.events("record_generated")
