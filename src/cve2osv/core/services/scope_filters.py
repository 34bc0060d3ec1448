"""Static deny lists that veto candidate data before it reaches the cache."""

from __future__ import annotations

from typing import Iterable

from ..domain.models import Reference, VendorProduct

# References with these tags have been found to point at unrelated
# repositories. "Exploit" and "Third Party Advisory" would qualify too but
# cost more valid records than they save.
REF_TAG_DENYLIST: tuple[str, ...] = (
    "Broken Link",
)

# Vendor/products known not to be open source whose references
# cross-contaminate repository derivation between CVEs.
VENDOR_PRODUCT_DENYLIST: tuple[VendorProduct, ...] = (
    # ontap_select_deploy_administration_utility (CVE-2022-2068),
    # active_iq_unified_manager (CVE-2022-26488) and cloud_backup
    # (CVE-2021-28375) all misattributed, so the whole vendor is out.
    VendorProduct("netapp", ""),
    # CVE-2021-28957 associates it with github.com/lxml/lxml
    VendorProduct("oracle", "zfs_storage_appliance_kit"),
    # CVE-2020-15767 associates it with the OSS gradle repo
    VendorProduct("gradle", "enterprise"),
)


class VendorProductDenyList:
    """Ordered vendor/product deny list with empty-product vendor wildcards."""

    def __init__(self, entries: Iterable[VendorProduct] = VENDOR_PRODUCT_DENYLIST) -> None:
        self._entries = tuple(entries)

    @classmethod
    def from_strings(cls, entries: Iterable[str]) -> "VendorProductDenyList":
        """Build from ``vendor:product`` strings; ``vendor:`` denies the whole vendor."""
        return cls(VendorProduct.parse(e) for e in entries)

    @property
    def entries(self) -> tuple[VendorProduct, ...]:
        return self._entries

    def is_denied(self, vp: VendorProduct) -> bool:
        return (
            VendorProduct(vp.vendor, "") in self._entries
            or vp in self._entries
        )


def ref_acceptable(ref: Reference, tag_denylist: Iterable[str]) -> bool:
    """False when any of the reference's tags is deny-listed."""
    return not any(tag in ref.tags for tag in tag_denylist)
