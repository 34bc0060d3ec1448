from __future__ import annotations

from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..core.domain.exceptions import MalformedCacheError
from ..core.domain.models import VendorProduct

_SNAPSHOT = TypeAdapter(dict[str, list[str]])


class CpeRepoMapLoader:
    """Loads the ``{"vendor:product": [repo, ...]}`` snapshot produced by cperepos."""

    def load(self, path: Path) -> dict[VendorProduct, list[str]]:
        """Raises MalformedCacheError if the file is unreadable or malformed."""
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise MalformedCacheError(f"failed to read {path}: {e}") from e
        try:
            parsed = _SNAPSHOT.validate_json(raw)
        except ValidationError as e:
            raise MalformedCacheError(f"malformed vendor/product map {path}: {e}") from e
        return {VendorProduct.parse(key): repos for key, repos in parsed.items()}
