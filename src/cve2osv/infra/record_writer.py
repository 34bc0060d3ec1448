from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..shared.to_jsonable import to_jsonable


class RecordWriter:
    """Writes records under ``<out_dir>/<vendor>/<product>/``."""

    def __init__(self, out_dir: Path) -> None:
        self._out_dir = Path(out_dir)

    def _target(self, vendor: str, product: str, filename: str) -> Path:
        directory = self._out_dir / vendor / product
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def write_record(self, *, vendor: str, product: str, filename: str, payload: Any) -> Path:
        fp = self._target(vendor, product, filename)
        fp.write_text(json.dumps(to_jsonable(payload), ensure_ascii=False, indent=2), encoding="utf-8")
        return fp

    def write_notes(self, *, vendor: str, product: str, filename: str, notes: list[str]) -> Optional[Path]:
        if not notes:
            return None
        fp = self._target(vendor, product, filename)
        fp.write_text("\n".join(notes) + "\n", encoding="utf-8")
        return fp
