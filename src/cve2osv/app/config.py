from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.services.scope_filters import REF_TAG_DENYLIST, VENDOR_PRODUCT_DENYLIST


APP_NAME = "cve2osv"


def _default_home() -> Path:
    """Get default home directory using platformdirs."""
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_data_dir)


class DirectoryConfig(BaseSettings):
    """Directory configuration with computed paths."""

    model_config = SettingsConfigDict(env_prefix="CVE2OSV_DIRECTORIES__")

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for cve2osv run data",
    )

    @computed_field
    @property
    def logs_dir(self) -> Path:
        """Directory for per-run JSONL logs."""
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


class OutputConfig(BaseSettings):
    """Where and how records are written."""

    model_config = SettingsConfigDict(env_prefix="CVE2OSV_OUTPUT__")

    out_dir: Path | None = Field(
        default=None,
        description="Root directory for generated records and outcomes.csv",
    )

    format: str = Field(
        default="OSV",
        description="Record format (OSV, PackageInfo)",
    )


class FilterConfig(BaseSettings):
    """Scope filters applied while deriving repositories."""

    model_config = SettingsConfigDict(env_prefix="CVE2OSV_FILTERS__")

    ref_tag_denylist: list[str] = Field(
        default_factory=lambda: list(REF_TAG_DENYLIST),
        description="Reference tags that veto repository derivation",
    )

    vendor_product_denylist: list[str] = Field(
        default_factory=lambda: [str(vp) for vp in VENDOR_PRODUCT_DENYLIST],
        description="'vendor:product' pairs never mined; an empty product denies the whole vendor",
    )


class GitConfig(BaseSettings):
    """Remote git access."""

    model_config = SettingsConfigDict(env_prefix="CVE2OSV_GIT__")

    ls_remote_timeout: float = Field(
        default=60.0,
        description="Seconds before a git ls-remote call is killed",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="CVE2OSV_LOGGING__")

    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    console_output: bool = Field(default=False, description="Mirror log events to stderr")
    logger_name: str = Field(default=APP_NAME, description="Logger name")


class RuntimeConfig(BaseSettings):
    """Values set per invocation rather than by the environment."""

    model_config = SettingsConfigDict(env_prefix="CVE2OSV_RUNTIME__")

    run_name: str | None = Field(
        default=None,
        description="Log file stem for this run; no JSONL log when unset",
    )


class AppConfig(BaseSettings):
    """Root application configuration.

    All configuration is loaded from environment variables with CVE2OSV_ prefix.
    Use double underscore for nested config: CVE2OSV_OUTPUT__FORMAT

    Example env vars:
        export CVE2OSV_DIRECTORIES__HOME=/custom/path
        export CVE2OSV_OUTPUT__FORMAT=PackageInfo
        export CVE2OSV_GIT__LS_REMOTE_TIMEOUT=30
        export CVE2OSV_LOGGING__LEVEL=DEBUG
        export CVE2OSV_FILTERS__VENDOR_PRODUCT_DENYLIST='["netapp:", "gradle:enterprise"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="CVE2OSV_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)

    def for_run(
        self,
        *,
        out_dir: Path | None = None,
        out_format: str | None = None,
        run_name: str | None = None,
        log_level: str | None = None,
        console_output: bool | None = None,
    ) -> "AppConfig":
        """Return a copy with per-invocation overrides applied."""
        output = self.output.model_copy(update={
            k: v for k, v in {"out_dir": out_dir, "format": out_format}.items() if v is not None
        })
        logging_ = self.logging.model_copy(update={
            k: v for k, v in {"level": log_level, "console_output": console_output}.items() if v is not None
        })
        runtime = self.runtime if run_name is None else self.runtime.model_copy(update={"run_name": run_name})
        return self.model_copy(update={"output": output, "logging": logging_, "runtime": runtime})
