"""CLI entrypoint for product photo acquisition.

Usage:
    python -m productphoto.acquire [--config config.yaml] [--catalog catalog.yaml]
                                   [--output <dir>] [--project-root <dir>] [--json]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from productphoto.acquire.controller import AcquisitionController
from productphoto.acquire.fetcher import HttpImageFetcher
from productphoto.acquire.query import QueryBuilder
from productphoto.acquire.search import GoogleImageSearch
from productphoto.acquire.validator import GeminiClassifier, Validator
from productphoto.catalog import default_catalog, load_catalog
from productphoto.config import (
    ProductPhotoConfig,
    load_config,
    load_environment,
    resolve_api_key,
)
from productphoto.context import RunContext
from productphoto.errors import ConfigurationError
from productphoto.types import AcquisitionStatus, AcquisitionSummary
from productphoto.utils.log_config import configure_logging

console = Console()
log_console = Console(stderr=True)

_STATUS_STYLE = {
    AcquisitionStatus.success: "green",
    AcquisitionStatus.failed: "red",
    AcquisitionStatus.skipped: "yellow",
}


def build_controller(
    config: ProductPhotoConfig,
    output_dir: Path,
    api_key: str,
    context: RunContext,
) -> AcquisitionController:
    """Wire the production collaborators into a controller."""
    classifier = GeminiClassifier.from_config(config.validator, api_key=api_key)
    return AcquisitionController(
        output_dir=output_dir,
        source=GoogleImageSearch(config.search),
        fetcher=HttpImageFetcher(config.fetch),
        validator=Validator(classifier, logger=context.logger),
        config=config.acquisition,
        query_builder=QueryBuilder.from_config(config.acquisition),
        context=context,
    )


def _build_summary_panel(summary: AcquisitionSummary, output_dir: Path) -> Panel:
    lines = [
        f"[bold]Output directory:[/bold] {output_dir}",
        f"[bold]Items:[/bold] {len(summary.results)}",
        f"  [green]Successful:[/green] {summary.successful}",
        f"  [red]Failed:[/red] {summary.failed}",
        f"  [yellow]Skipped:[/yellow] {summary.skipped}",
    ]
    return Panel("\n".join(lines), title="Acquisition Complete", border_style="green")


def _build_result_table(summary: AcquisitionSummary) -> Table:
    table = Table(title="Per-Item Results", show_lines=True)
    table.add_column("File key", style="cyan")
    table.add_column("Label")
    table.add_column("Status", width=8)
    table.add_column("Attempts", justify="right", width=8)
    table.add_column("File")
    for r in summary.results:
        style = _STATUS_STYLE[r.status]
        table.add_row(
            r.file_key,
            r.label,
            f"[{style}]{r.status.value}[/{style}]",
            str(r.attempts),
            r.final_path.name if r.final_path else "-",
        )
    return table


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Download one validated front-facing product photo per catalog item.",
        prog="python -m productphoto.acquire",
    )
    parser.add_argument("--config", type=Path, default=None, help="productphoto config YAML")
    parser.add_argument("--catalog", type=Path, default=None, help="Catalog YAML (default: built-in)")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Directory for accepted images")
    parser.add_argument("--project-root", type=Path, default=None, help="Root holding .env and logs/")
    parser.add_argument("--json", action="store_true", help="Output JSON summary")
    args = parser.parse_args(argv)

    config_error: ConfigurationError | None = None
    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        # Defaults pick the log location when the config file is unusable
        config, config_error = ProductPhotoConfig.default(), e
    if args.project_root is not None:
        config.paths.project_root = args.project_root

    configure_logging(
        config.paths.log_path / config.acquisition.log_file, console=log_console, quiet=args.json
    )
    context = RunContext(logger=logging.getLogger("productphoto.acquire"))
    log = context.logger
    log.info("Starting watch image download with vision validation")

    if config_error is not None:
        log.error("%s", config_error)
        return 1

    load_environment(config.paths)
    try:
        api_key = resolve_api_key(
            config.validator.api_key_env_var, config.validator.placeholder_keys
        )
    except ConfigurationError as e:
        log.error("%s", e)
        return 1

    if args.catalog is not None and not args.catalog.is_file():
        log.error("Catalog file not found: %s", args.catalog)
        return 1
    try:
        items = load_catalog(args.catalog) if args.catalog else default_catalog()
    except (ValueError, OSError, yaml.YAMLError) as e:
        log.error("Invalid catalog %s: %s", args.catalog, e)
        return 1
    output_dir = args.output or config.paths.images_path

    try:
        controller = build_controller(config, output_dir, api_key, context)
        summary = controller.run(items)
    except ConfigurationError as e:
        log.error("%s", e)
        return 1
    except Exception as e:
        log.exception("Script error: %s", e)
        return 1
    log.info("Script execution completed")

    if args.json:
        result = {"output_dir": str(output_dir), **summary.to_dict()}
        print(json.dumps(result, indent=2))
    else:
        console.print()
        console.print(_build_summary_panel(summary, output_dir))
        console.print()
        console.print(_build_result_table(summary))

    return 0


if __name__ == "__main__":
    sys.exit(main())
