"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from ..core.domain.models import RunSummary


def format_run_summary(summary: RunSummary) -> str:
    """Format a conversion run summary for human-readable CLI output."""
    lines = []
    lines.append("=" * 60)
    lines.append("CONVERSION SUMMARY")
    lines.append("=" * 60)

    lines.append(f"CVEs in feed:            {summary.total_cves}")
    lines.append(f"CVEs for applications:   {summary.cves_for_applications}")
    lines.append(f"CVEs with known repos:   {summary.cves_for_known_repos}")
    lines.append(f"Records generated:       {summary.records_generated}")

    if summary.outcome_counts:
        lines.append("")
        lines.append(format_outcome_counts(summary.outcome_counts))

    if summary.outcomes_file:
        lines.append(f"\nOutcomes: {summary.outcomes_file}")

    lines.append("=" * 60)
    return "\n".join(lines)


def format_outcome_counts(counts: dict[str, int]) -> str:
    """Format per-outcome CVE counts as an aligned two-column table."""
    if not counts:
        return "No outcomes recorded."

    width = max(len("Outcome"), max(len(k) for k in counts))
    lines = [f"{'Outcome':<{width}}  {'CVEs':>6}", "-" * (width + 8)]
    for label, count in counts.items():
        lines.append(f"{label:<{width}}  {count:>6}")
    lines.append("-" * (width + 8))
    lines.append(f"{'Total':<{width}}  {sum(counts.values()):>6}")
    return "\n".join(lines)
