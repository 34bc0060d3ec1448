from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from ..core.domain.exceptions import FeedError
from ..core.domain.models import CPEMatch, CVEItem, Reference


def _iter_cpe_matches(nodes: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    """Depth-first walk over configuration nodes and their children."""
    for node in nodes:
        yield from node.get("cpe_match") or []
        yield from _iter_cpe_matches(node.get("children") or [])


def _english_first(description_data: list[dict[str, Any]]) -> tuple[str, ...]:
    values = [d.get("value", "") for d in description_data if d.get("lang") == "en"]
    values += [d.get("value", "") for d in description_data if d.get("lang") != "en"]
    return tuple(v for v in values if v)


def parse_cve_item(item: dict[str, Any]) -> CVEItem:
    """Parse one ``CVE_Items`` entry of an NVD JSON 1.1 feed."""
    cve = item["cve"]
    cve_id = cve["CVE_data_meta"]["ID"]

    references = tuple(
        Reference(url=ref["url"], tags=tuple(ref.get("tags") or ()))
        for ref in (cve.get("references") or {}).get("reference_data") or []
        if ref.get("url")
    )

    matches = []
    nodes = (item.get("configurations") or {}).get("nodes") or []
    for m in _iter_cpe_matches(nodes):
        criteria = m.get("cpe23Uri") or m.get("criteria")
        if not criteria:
            continue
        matches.append(
            CPEMatch(
                criteria=criteria,
                vulnerable=bool(m.get("vulnerable", True)),
                version_start_including=m.get("versionStartIncluding", ""),
                version_start_excluding=m.get("versionStartExcluding", ""),
                version_end_including=m.get("versionEndIncluding", ""),
                version_end_excluding=m.get("versionEndExcluding", ""),
            )
        )

    descriptions = _english_first((cve.get("description") or {}).get("description_data") or [])

    return CVEItem(
        cve_id=cve_id,
        references=references,
        cpe_matches=tuple(matches),
        descriptions=descriptions,
        published=item.get("publishedDate"),
        modified=item.get("lastModifiedDate"),
    )


class NvdFeed:
    """Reader for NVD CVE JSON 1.1 feed files."""

    def load(self, path: Path) -> list[CVEItem]:
        """Load every CVE item in file order.

        Raises:
            FeedError: If the file is unreadable, not JSON, or not a feed
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise FeedError(f"failed to open {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise FeedError(f"failed to parse NVD CVE JSON {path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("CVE_Items"), list):
            raise FeedError(f"{path} is not an NVD CVE feed (missing CVE_Items)")

        items = []
        for index, raw in enumerate(data["CVE_Items"]):
            try:
                items.append(parse_cve_item(raw))
            except (KeyError, TypeError, AttributeError) as e:
                raise FeedError(f"malformed CVE item #{index} in {path}: {e!r}") from e
        return items
