"""
Command line entry point: run one request document through the pipeline.

    knurl request.yaml --env staging.yaml
    knurl request.json --debug

Documents are YAML or JSON (camelCase or snake_case keys).
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from knurl.client import RequestRunner
from knurl.config import ClientSettings
from knurl.domain import ResponseState, parse_environment, parse_request
from knurl.errors import KnurlError, SchemaViolation
from knurl.logging_config import get_logger, setup_logging


logger = get_logger(__name__)
console = Console()
err_console = Console(stderr=True)


def load_document(path: Path) -> dict[str, Any]:
    """Read a YAML/JSON document into a mapping."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return data


def render_response(response: ResponseState, raw: bool = False) -> None:
    """Print a response summary, then the body."""
    if raw:
        console.print_json(response.model_dump_json(by_alias=True))
        return

    table = Table(show_header=False, box=None)
    table.add_row("protocol", response.protocol)
    table.add_row("request", response.request_id)
    table.add_row("time", f"{response.response_time:.1f} ms")
    table.add_row("size", f"{response.response_size} bytes")
    table.add_row("timestamp", response.timestamp)

    payload = response.data
    if payload.type == "http":
        table.add_row("status", f"{payload.data.status} {payload.data.status_text}")
        console.print(table)
        for name, value in payload.data.headers.items():
            console.print(f"[dim]{name}:[/dim] {value}")
        if payload.data.body:
            console.print()
            console.print(payload.data.body, markup=False, highlight=False)
    else:
        table.add_row("status", payload.data.status)
        console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knurl",
        description="Execute a request document with environment variable resolution",
    )
    parser.add_argument(
        "request",
        type=Path,
        help="Path to the request document (YAML or JSON)",
    )
    parser.add_argument(
        "--env",
        type=Path,
        metavar="FILE",
        help="Path to an environment document to resolve {{variables}} against",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full response as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging on the console",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = ClientSettings.from_env()
    except ValueError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}", soft_wrap=True)
        return 2
    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(settings.log_dir, console_level=console_level)

    try:
        request = parse_request(load_document(args.request))
        environment = parse_environment(load_document(args.env)) if args.env else None
    except (OSError, ValueError, yaml.YAMLError, SchemaViolation) as e:
        logger.info(f"Rejected input | {e}")
        err_console.print(f"[red]Could not read input:[/red] {escape(str(e))}", soft_wrap=True)
        return 2

    runner = RequestRunner(settings=settings)
    try:
        response = asyncio.run(runner.send(request, environment))
    except KnurlError as e:
        logger.info(f"Request failed | {e}")
        err_console.print(f"[red]Request failed:[/red] {escape(str(e))}", highlight=False, soft_wrap=True)
        return 1

    render_response(response, raw=args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
