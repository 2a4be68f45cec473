"""CLI entry point for swagger-viewer."""

import asyncio
import json
import sys
from pathlib import Path

import click
import structlog

from swagger_viewer.errors import SwaggerToolError
from swagger_viewer.fetcher import DEFAULT_TIMEOUT
from swagger_viewer.logging_config import FORMATS, LEVELS, configure_logging
from swagger_viewer.server import run_stdio
from swagger_viewer.session import SwaggerSession

logger = structlog.get_logger(__name__)


def _run(coro):
    """Run a session operation, turning tool errors into a CLI error."""
    try:
        return asyncio.run(coro)
    except SwaggerToolError as e:
        raise click.ClickException(e.message)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), envvar="SWAGGER_VIEWER_CONFIG", default=None, help="Config file (default: ~/swagger.json).")
@click.option("--url", "swagger_url", envvar="SWAGGER_VIEWER_URL", default=None, help="Swagger/OpenAPI document URL; overrides the config file.")
@click.option("--timeout", type=float, envvar="SWAGGER_VIEWER_TIMEOUT", default=DEFAULT_TIMEOUT, show_default=True, help="HTTP timeout in seconds.")
@click.option("--log-level", default="info", envvar="SWAGGER_VIEWER_LOG_LEVEL", type=click.Choice(sorted(LEVELS)), help="Log level.")
@click.option("--log-format", default="pretty", envvar="SWAGGER_VIEWER_LOG_FORMAT", type=click.Choice(FORMATS), help="Log output format.")
@click.pass_context
def main(ctx, config_path: Path | None, swagger_url: str | None, timeout: float, log_level: str, log_format: str):
    """Swagger Viewer — search and generate code for OpenAPI endpoints."""
    configure_logging(level=log_level, format_type=log_format)
    ctx.obj = {"config_path": config_path, "swagger_url": swagger_url, "timeout": timeout}


def _session(ctx, watch: bool = False) -> SwaggerSession:
    return SwaggerSession(
        config_path=ctx.obj["config_path"],
        swagger_url=ctx.obj["swagger_url"],
        watch=watch,
        timeout=ctx.obj["timeout"],
    )


@main.command()
@click.option("--no-watch", is_flag=True, help="Do not reload when the config file changes.")
@click.pass_context
def serve(ctx, no_watch: bool):
    """Run the MCP server on stdio."""
    session = _session(ctx, watch=not no_watch)
    try:
        asyncio.run(run_stdio(session))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Fatal error running server")
        sys.exit(1)


@main.command()
@click.argument("query")
@click.pass_context
def search(ctx, query: str):
    """Search endpoints whose path, method, summary, description or operationId contain QUERY."""
    _echo_json(_run(_session(ctx).search(query)))


@main.command()
@click.argument("path")
@click.argument("method")
@click.option("--language", default="javascript", show_default=True, help="Target language.")
@click.pass_context
def gen_code(ctx, path: str, method: str, language: str):
    """Generate client code for the endpoint METHOD PATH."""
    result = _run(_session(ctx).generate_code(path, method, language))
    click.echo(result["code"])


@main.command()
@click.pass_context
def endpoints(ctx):
    """List every path with its HTTP methods."""
    _echo_json(_run(_session(ctx).get_all_endpoints()))
