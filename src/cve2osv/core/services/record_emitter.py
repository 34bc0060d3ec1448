from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..domain.cpe import parse_cpe
from ..domain.exceptions import ConversionError, CPEParseError, NoRangesError
from ..domain.models import CVEItem, OutputFormat, VersionInfo
from ..domain.osv import build_osv_record, build_package_info, osv_ranges
from ..ports import LoggerPort, RecordWriterPort
from .outcome_classifier import CVEFacts, OutcomeClassifier

NO_CPE_PLACEHOLDER = "ENOCPE"


@dataclass
class EmittedRecord:
    record_path: Path
    notes_path: Path | None


class RecordEmitter:
    """Turns resolved version data into an output record on disk."""

    def __init__(
        self,
        *,
        writer: RecordWriterPort,
        classifier: OutcomeClassifier,
        logger: LoggerPort,
        out_format: OutputFormat = OutputFormat.OSV,
    ) -> None:
        self._writer = writer
        self._classifier = classifier
        self._logger = logger
        self._format = OutputFormat(out_format)

    def emit(self, cve: CVEItem, facts: CVEFacts) -> EmittedRecord:
        """Write the record for a CVE whose versions have been resolved.

        Raises:
            UnresolvedFixError: Fixed versions exist but no repo has a fixed commit
            NoRangesError: No affected commit ranges were determined
            ConversionError: The CVE's first CPE is unusable for output placement
        """
        vendor, product = self._placement(cve)
        versions = facts.versions or VersionInfo()
        self._classifier.check_resolved(facts)

        if self._format is OutputFormat.OSV:
            payload = build_osv_record(cve, versions)
            if not osv_ranges(payload):
                raise NoRangesError(cve.cve_id, f"no affected ranges detected for {product!r}")
            stem = cve.cve_id
        else:
            versions = versions.copy()
            versions.affected_versions = []
            payload = build_package_info(versions)
            stem = f"{cve.cve_id}.nvd"

        record_path = self._writer.write_record(
            vendor=vendor, product=product, filename=f"{stem}.json", payload=payload,
        )
        notes_path: Path | None = None
        try:
            notes_path = self._writer.write_notes(
                vendor=vendor, product=product, filename=f"{stem}.notes", notes=facts.notes,
            )
        except OSError as e:
            # The record stands without its notes.
            self._logger.warning("notes_not_written", cve=cve.cve_id, error=str(e))
        self._logger.info(
            "record_generated",
            cve=cve.cve_id,
            format=self._format.value,
            product=product,
            path=str(record_path),
        )
        return EmittedRecord(record_path=record_path, notes_path=notes_path)

    @staticmethod
    def _placement(cve: CVEItem) -> tuple[str, str]:
        cpes = cve.cpes
        if not cpes:
            return NO_CPE_PLACEHOLDER, NO_CPE_PLACEHOLDER
        try:
            cpe = parse_cpe(cpes[0])
        except CPEParseError as e:
            raise ConversionError(cve.cve_id, f"can't generate a record without valid CPE data: {e}") from e
        return cpe.vendor, cpe.product
