from __future__ import annotations

from pathlib import Path

from .config import AppConfig
from .container import Container
from ..core.domain.exceptions import UnsupportedFormatError
from ..core.domain.models import OutputFormat, RunSummary


def parse_output_format(out_format: str) -> OutputFormat:
    """Raises UnsupportedFormatError for anything but OSV or PackageInfo."""
    try:
        return OutputFormat(out_format)
    except ValueError:
        raise UnsupportedFormatError(out_format) from None


def _create_container(config: AppConfig) -> Container:
    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()
    return container


def convert(
    nvd_json: Path,
    out_dir: Path,
    *,
    cpe_repos: Path | None = None,
    out_format: str = "OSV",
    config: AppConfig | None = None,
) -> RunSummary:
    """Convert an NVD CVE feed into OSV or PackageInfo records.

    Args:
        nvd_json: NVD CVE JSON 1.1 feed
        out_dir: Root directory for records and outcomes.csv
        cpe_repos: Optional vendor/product to repository snapshot
        out_format: "OSV" or "PackageInfo"
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        Run summary counters

    Raises:
        UnsupportedFormatError: If out_format is not recognised
        FeedError: If the feed cannot be read
        MalformedCacheError: If the snapshot is malformed
    """
    fmt = parse_output_format(out_format)
    base = config if config is not None else AppConfig()
    run_config = base.for_run(
        out_dir=Path(out_dir),
        out_format=fmt.value,
        run_name=base.runtime.run_name or Path(nvd_json).stem,
    )

    container = _create_container(run_config)
    try:
        uc = container.convert_uc()
        return uc.execute(nvd_json=Path(nvd_json), cpe_repos=Path(cpe_repos) if cpe_repos else None)
    finally:
        container.shutdown_resources()


def outcomes(out_dir: Path, config: AppConfig | None = None) -> dict[str, int]:
    """Count the outcomes recorded by a previous conversion run.

    Raises:
        FileNotFoundError: If out_dir holds no outcomes.csv
    """
    container = _create_container(config if config is not None else AppConfig())
    try:
        return container.outcomes_uc().execute(Path(out_dir))
    finally:
        container.shutdown_resources()
