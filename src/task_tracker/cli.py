from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import TrackerConfig, load_config
from .errors import MalformedPersistedData
from .logging_setup import configure_logging
from .models import Status
from .persistence import DatasetFile


def _resolve_config(args: argparse.Namespace) -> TrackerConfig:
    config_path = Path(args.config).expanduser() if args.config else None
    config, err = load_config(config_path)
    if err:
        logger.warning("Ignoring config file: {}", err)
    if args.log_level:
        config.log_level = args.log_level.upper()
    if getattr(args, "data_file", None):
        config.data_file = Path(args.data_file).expanduser()
    return config


def _server(args: argparse.Namespace) -> int:
    import uvicorn

    from .server import create_app
    from .store import TaskStore

    config = _resolve_config(args)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    configure_logging(config.log_level)

    store = TaskStore(DatasetFile(config.data_file))
    app = create_app(store=store, config=config)
    logger.info("Serving on {}:{} with data file {}", config.host, config.port, config.data_file)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    return 0


def _inspect(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    configure_logging(config.log_level)
    console = Console()

    source = DatasetFile(config.data_file)
    if not source.exists():
        console.print(f"[yellow]No data file at {config.data_file}; the service would start empty.[/yellow]")
        return 0
    try:
        dataset = source.read()
    except MalformedPersistedData as exc:
        console.print(f"[red]Malformed data file {config.data_file}:[/red] {exc}")
        return 1

    table = Table(title=f"Users in {config.data_file}")
    table.add_column("User ID", style="cyan")
    table.add_column("Name")
    for status in Status:
        table.add_column(status.value, justify="right")
    table.add_column("Total", justify="right", style="bold")
    for user in dataset.users.values():
        counts = {status: 0 for status in Status}
        for task in user.tasks.values():
            counts[task.status] += 1
        table.add_row(
            str(user.id),
            user.name,
            *(str(counts[status]) for status in Status),
            str(len(user.tasks)),
        )
    console.print(table)
    console.print(f"{len(dataset.users)} users, {dataset.task_count()} tasks")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Task Tracker service")
    parser.add_argument("--config", default=None, help="YAML config file (default: ./task_tracker.yaml if present)")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    server = subparsers.add_parser("server", help="Start the HTTP service")
    server.add_argument("--host", default=None)
    server.add_argument("--port", default=None, type=int)
    server.add_argument("--data-file", default=None, help="Dataset file (default: ./data.json)")
    server.set_defaults(func=_server)

    inspect = subparsers.add_parser("inspect", help="Summarize the dataset file")
    inspect.add_argument("--data-file", default=None, help="Dataset file (default: ./data.json)")
    inspect.set_defaults(func=_inspect)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
