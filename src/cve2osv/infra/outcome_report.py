from __future__ import annotations

from pathlib import Path
from typing import Mapping

import pandas as pd

from ..core.domain.models import ConversionOutcome

OUTCOMES_FILE = "outcomes.csv"
COLUMNS = ["CVE", "outcome", "repos"]


class OutcomeReport:
    """``outcomes.csv``: one row per CVE with its outcome and derived repos."""

    def __init__(self, out_dir: Path | None = None) -> None:
        self._out_dir = Path(out_dir) if out_dir is not None else None

    def write(
        self,
        outcomes: Mapping[str, ConversionOutcome],
        repos_for_cve: Mapping[str, list[str]],
    ) -> Path:
        if self._out_dir is None:
            raise ValueError("OutcomeReport has no output directory to write to")
        rows = [
            {"CVE": cve_id, "outcome": outcome.label, "repos": " ".join(repos_for_cve.get(cve_id, []))}
            for cve_id, outcome in outcomes.items()
        ]
        self._out_dir.mkdir(parents=True, exist_ok=True)
        fp = self._out_dir / OUTCOMES_FILE
        pd.DataFrame(rows, columns=COLUMNS).to_csv(fp, index=False)
        return fp

    def read(self, out_dir: Path) -> dict[str, ConversionOutcome]:
        """Raises FileNotFoundError if no report exists in out_dir."""
        fp = Path(out_dir) / OUTCOMES_FILE
        if not fp.is_file():
            raise FileNotFoundError(f"No {OUTCOMES_FILE} in {out_dir}")
        df = pd.read_csv(fp, dtype=str, keep_default_na=False)
        return {row.CVE: ConversionOutcome.from_label(row.outcome) for row in df.itertuples(index=False)}

