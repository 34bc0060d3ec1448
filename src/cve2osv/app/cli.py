from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from .cli_formatter import format_outcome_counts, format_run_summary
from .config import AppConfig
from .container import Container
from .main import parse_output_format
from ..core.domain.exceptions import FeedError, MalformedCacheError, UnsupportedFormatError

load_dotenv()

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def convert(
    nvd_json: Path = typer.Option(..., "--nvd-json", help="Path to NVD CVE JSON to examine"),
    cpe_repos: Optional[Path] = typer.Option(
        None, "--cpe-repos", help="Path to JSON mapping of vendor:product to repos generated by cperepos",
    ),
    out_dir: Path = typer.Option(..., "--out-dir", help="Path to output results"),
    out_format: str = typer.Option("OSV", "--out-format", help="Format to output {OSV,PackageInfo}"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
    json_output: bool = typer.Option(False, "--json", help="Output run summary as JSON"),
):
    """Convert NVD CVE records into OSV or PackageInfo records."""
    try:
        fmt = parse_output_format(out_format)
    except UnsupportedFormatError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    base = AppConfig()
    run_name = base.runtime.run_name or nvd_json.stem
    config = base.for_run(
        out_dir=out_dir,
        out_format=fmt.value,
        run_name=run_name,
        log_level=log_level,
        console_output=not json_output,
    )

    log_file = config.directories.logs_dir / f"{run_name}.jsonl"
    if log_file.exists():
        log_file.unlink()

    if not json_output:
        typer.echo(f"Converting: {nvd_json} -> {out_dir} ({fmt.value})")
        typer.echo(f"Log file: {log_file}")

    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()

    try:
        summary = container.convert_uc().execute(nvd_json=nvd_json, cpe_repos=cpe_repos)
    except (FeedError, MalformedCacheError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        container.shutdown_resources()

    if json_output:
        typer.echo(json.dumps(asdict(summary), ensure_ascii=False, indent=2))
    else:
        typer.echo(format_run_summary(summary))


@app.command()
def outcomes(
    out_dir: Path = typer.Argument(..., help="Output directory of a previous convert run"),
    json_output: bool = typer.Option(False, "--json", help="Output counts as JSON"),
):
    """Summarize outcomes.csv from a previous conversion run."""
    config = AppConfig()
    container = Container()
    container.config.from_pydantic(config)
    container.init_resources()

    try:
        counts = container.outcomes_uc().execute(out_dir)
    except (FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        container.shutdown_resources()

    if json_output:
        typer.echo(json.dumps({"total": sum(counts.values()), "outcomes": counts}, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_outcome_counts(counts))


if __name__ == "__main__":
    app()
