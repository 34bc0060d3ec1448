"""Ordered gate chain assigning each CVE exactly one ConversionOutcome.

Gates are evaluated top to bottom and the first one that applies decides the
outcome. Facts that have not been computed yet (``None``) never trigger a
gate, so the chain can be re-evaluated as a CVE moves through the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence, Type

from ..domain.exceptions import ConversionError, NoRangesError, UnresolvedFixError
from ..domain.models import ConversionOutcome, VersionInfo


@dataclass
class CVEFacts:
    """What is known about a CVE at a given point in processing."""
    cve_id: str
    reference_count: int = 0
    cpe_count: int = 0
    app_cpe_count: int | None = None
    repos: list[str] | None = None
    versions: VersionInfo | None = None
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Gate:
    outcome: ConversionOutcome
    applies: Callable[[CVEFacts], bool]
    reason: str
    error: Type[ConversionError] | None = None


def _fix_unresolvable(f: CVEFacts) -> bool:
    if f.versions is None or f.repos is None:
        return False
    return f.versions.has_fixed_versions() and not any(
        f.versions.has_fixed_commits(repo) for repo in f.repos
    )


PRE_RESOLUTION_GATES: tuple[Gate, ...] = (
    Gate(
        ConversionOutcome.REJECTED,
        lambda f: f.reference_count == 0 and f.cpe_count == 0,
        "no CPEs and no references",
    ),
    Gate(
        ConversionOutcome.NO_SOFTWARE,
        lambda f: f.cpe_count > 0 and f.app_cpe_count == 0,
        "no application CPEs",
    ),
    Gate(
        ConversionOutcome.NO_REPOS,
        lambda f: f.repos is not None and not f.repos,
        "no viable repository",
    ),
)

POST_RESOLUTION_GATES: tuple[Gate, ...] = (
    Gate(
        ConversionOutcome.FIX_UNRESOLVABLE,
        _fix_unresolvable,
        "fixed versions not resolved to commits",
        UnresolvedFixError,
    ),
    Gate(
        ConversionOutcome.NO_RANGES,
        lambda f: f.versions is not None and not f.versions.affected_commits,
        "no affected commit ranges",
        NoRangesError,
    ),
)

DEFAULT_GATES: tuple[Gate, ...] = PRE_RESOLUTION_GATES + POST_RESOLUTION_GATES


class OutcomeClassifier:
    def __init__(self, gates: Sequence[Gate] = DEFAULT_GATES) -> None:
        self._gates = tuple(gates)

    @property
    def gates(self) -> tuple[Gate, ...]:
        return self._gates

    def first_match(self, facts: CVEFacts) -> Gate | None:
        for gate in self._gates:
            if gate.applies(facts):
                return gate
        return None

    def classify(self, facts: CVEFacts) -> ConversionOutcome | None:
        """Outcome of the first applicable gate, or None to keep going."""
        gate = self.first_match(facts)
        return gate.outcome if gate else None

    def check_resolved(self, facts: CVEFacts) -> None:
        """Raise the sentinel error of the first applicable post-resolution gate."""
        gate = self.first_match(facts)
        if gate is not None and gate.error is not None:
            raise gate.error(facts.cve_id, gate.reason)

    def outcome_for_error(self, exc: BaseException) -> ConversionOutcome:
        """Map a per-CVE failure back to its outcome by exception type."""
        for gate in self._gates:
            if gate.error is not None and isinstance(exc, gate.error):
                return gate.outcome
        return ConversionOutcome.UNKNOWN
