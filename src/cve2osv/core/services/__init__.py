from __future__ import annotations

from .repo_cache import VendorProductRepoCache
from .scope_filters import (
    REF_TAG_DENYLIST,
    VENDOR_PRODUCT_DENYLIST,
    VendorProductDenyList,
    ref_acceptable,
)
from .reference_miner import ReferenceMiner
from .commit_resolver import CommitResolver
from .outcome_classifier import CVEFacts, Gate, OutcomeClassifier
from .record_emitter import RecordEmitter
from .conversion_orchestrator import ConversionOrchestrator

__all__ = [
    "VendorProductRepoCache",
    "REF_TAG_DENYLIST",
    "VENDOR_PRODUCT_DENYLIST",
    "VendorProductDenyList",
    "ref_acceptable",
    "ReferenceMiner",
    "CommitResolver",
    "CVEFacts",
    "Gate",
    "OutcomeClassifier",
    "RecordEmitter",
    "ConversionOrchestrator",
]
