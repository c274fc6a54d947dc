"""CLI entrypoint for background removal.

Usage:
    python -m productphoto.matte [--force|-f] [--config config.yaml]
                                 [--source <dir>] [--output <dir>]
                                 [--project-root <dir>] [--json]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from productphoto.config import (
    ProductPhotoConfig,
    load_config,
    load_environment,
    resolve_api_key,
)
from productphoto.context import RunContext
from productphoto.errors import ConfigurationError
from productphoto.matte.base import BackgroundRemover
from productphoto.matte.removebg import RemoveBgClient
from productphoto.matte.stage import MattingStage
from productphoto.types import MattingSummary
from productphoto.utils.log_config import configure_logging

console = Console()
log_console = Console(stderr=True)


def build_remover(config: ProductPhotoConfig, api_key: str) -> BackgroundRemover:
    return RemoveBgClient.from_config(config.matting, api_key)


def _build_summary_panel(summary: MattingSummary, output_dir: Path) -> Panel:
    lines = [
        f"[bold]Output directory:[/bold] {output_dir}",
        f"[green]Successfully processed:[/green] {summary.processed}",
        f"[yellow]Skipped (already exist):[/yellow] {summary.skipped}",
        f"[red]Failed to process:[/red] {summary.failed}",
        f"[bold]Total images handled:[/bold] {summary.total}",
    ]
    return Panel("\n".join(lines), title="Background Removal Complete", border_style="green")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Remove backgrounds from accepted product photos via remove.bg.",
        prog="python -m productphoto.matte",
    )
    parser.add_argument(
        "--force", "-f", action="store_true",
        help="Reprocess images that already have an output file",
    )
    parser.add_argument("--config", type=Path, default=None, help="productphoto config YAML")
    parser.add_argument("--source", type=Path, default=None, help="Directory of accepted images")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Directory for matted images")
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
        config.paths.log_path / config.matting.log_file, console=log_console, quiet=args.json
    )
    context = RunContext(logger=logging.getLogger("productphoto.matte"))
    log = context.logger

    if config_error is not None:
        log.error("%s", config_error)
        return 1

    load_environment(config.paths)
    try:
        api_key = resolve_api_key(config.matting.api_key_env_var, config.matting.placeholder_keys)
    except ConfigurationError as e:
        log.error("%s", e)
        return 1

    source_dir = args.source or config.paths.images_path
    output_dir = args.output or config.paths.matte_path
    if not source_dir.is_dir():
        log.error("Error: Source directory does not exist: %s", source_dir)
        return 1

    try:
        stage = MattingStage(
            source_dir,
            output_dir,
            build_remover(config, api_key),
            config=config.matting,
            context=context,
        )
        summary = stage.run(force=args.force)
    except Exception as e:
        log.exception("Error processing directory: %s", e)
        return 1

    if args.json:
        result = {"output_dir": str(output_dir), **summary.to_dict()}
        print(json.dumps(result, indent=2))
    else:
        console.print()
        console.print(_build_summary_panel(summary, output_dir))

    return 0


if __name__ == "__main__":
    sys.exit(main())
