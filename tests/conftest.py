import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

load_dotenv()


@pytest.fixture(autouse=True)
def _ensure_src_on_syspath():
    # Add project src/ to sys.path for src-layout imports
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))
    yield


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path_factory, monkeypatch):
    # Keep per-run logs out of the user's data directory
    monkeypatch.setenv("CVE2OSV_DIRECTORIES__HOME", str(tmp_path_factory.mktemp("home")))
    yield


TESTS = Path(__file__).parent

# Marker per top-level test directory
MARKERS_BY_DIR = {
    TESTS / "cve2osv" / "core": pytest.mark.unit,
    TESTS / "cve2osv" / "shared": pytest.mark.unit,
    TESTS / "cve2osv" / "infra": pytest.mark.integration,
    TESTS / "cve2osv" / "app": pytest.mark.e2e,
}


def pytest_collection_modifyitems(config, items):
    for item in items:
        path = Path(item.path).resolve()
        for base, marker in MARKERS_BY_DIR.items():
            if path.is_relative_to(base.resolve()):
                item.add_marker(marker)
