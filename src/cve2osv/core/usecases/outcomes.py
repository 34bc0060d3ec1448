from __future__ import annotations

from collections import Counter
from pathlib import Path

from ..domain.models import ConversionOutcome
from ..ports import OutcomeReportPort


class OutcomesUseCase:
    """Use case for summarizing a previous run's outcomes report."""

    def __init__(self, *, report: OutcomeReportPort) -> None:
        self._report = report

    def execute(self, out_dir: Path) -> dict[str, int]:
        """Count CVEs per outcome, in enumeration order, omitting zero counts.

        Raises:
            FileNotFoundError: If the directory has no outcomes report
        """
        counts = Counter(self._report.read(out_dir).values())
        return {o.label: counts[o] for o in ConversionOutcome if counts[o]}
