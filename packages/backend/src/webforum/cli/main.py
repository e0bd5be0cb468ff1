"""WebForum CLI — run the server, prepare the database, probe a deployment.

Usage:
    webforum serve                       # Run the API with uvicorn
    webforum serve --port 9000 --reload  # Override host/port from settings
    webforum init-db                     # Create missing tables
    webforum health                      # GET /api/health on a running server
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys

import click
import httpx

from webforum.config import settings

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("WEBFORUM_API_URL", DEFAULT_API_URL).rstrip("/")


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


@click.group()
def cli():
    """WebForum backend management."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: WEBFORUM_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: WEBFORUM_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "webforum.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """Create any missing tables in the configured database."""
    from webforum.db.engine import create_schema, engine

    async def _init():
        try:
            await create_schema(engine)
        finally:
            await engine.dispose()

    _run(_init())
    click.secho("Database schema is up to date.", fg="green")


@cli.command()
@click.option("--url", default=None, help="Server base URL (default: WEBFORUM_API_URL).")
def health(url: str | None):
    """Check a running server's health endpoint."""
    base = (url or _api_url()).rstrip("/")
    try:
        resp = httpx.get(f"{base}/api/health", timeout=5.0)
    except httpx.HTTPError as e:
        click.secho(f"Error: server not reachable at {base} ({e})", fg="red", err=True)
        sys.exit(1)

    click.echo(json.dumps(resp.json(), indent=2))
    if resp.status_code != 200 or resp.json().get("status") != "healthy":
        sys.exit(1)


if __name__ == "__main__":
    cli()
