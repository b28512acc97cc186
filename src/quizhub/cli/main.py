"""QuizHub CLI — run the server, manage the schema, work with tokens.

Usage:
    quizhub serve --port 8000                    # Run the API with uvicorn
    quizhub init-db                              # Create tables in QUIZHUB_DATABASE_URL
    quizhub issue-token ada@example.com -r OWNER # Sign a token with QUIZHUB_JWT_SECRET
    quizhub verify-token <token>                 # Show who a token identifies
    quizhub quizzes --token <token>              # List published quizzes from a server
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Optional

import click
import httpx

from quizhub import __version__
from quizhub.auth.identity import Role
from quizhub.auth.tokens import default_codec
from quizhub.errors import InvalidToken

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8000"


def _api_url() -> str:
    return os.environ.get("QUIZHUB_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str]) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at a QuizHub server."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "-"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="quizhub")
def main():
    """QuizHub — quiz authoring and server-side scoring."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: QUIZHUB_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: QUIZHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from quizhub.config import settings

    uvicorn.run(
        "quizhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create all tables that don't exist yet."""
    from quizhub.db.engine import create_schema, engine

    async def _init():
        await create_schema(engine)
        await engine.dispose()

    asyncio.run(_init())
    click.secho("Schema ready.", fg="green")


@main.command("issue-token")
@click.argument("subject")
@click.option(
    "--role",
    "-r",
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    required=True,
)
def issue_token(subject: str, role: str):
    """Sign a bearer token for SUBJECT (an account email)."""
    click.echo(default_codec().issue(subject, Role.parse(role)))


@main.command("verify-token")
@click.argument("token")
def verify_token(token: str):
    """Verify TOKEN and print the identity it carries."""
    try:
        identity = default_codec().verify(token)
    except InvalidToken as e:
        click.secho(f"Error: {e.message}", fg="red", err=True)
        sys.exit(1)
    click.echo(f"subject: {identity.subject}")
    click.echo(f"role:    {identity.role.value}")


@main.command()
@click.option("--token", "-t", envvar="QUIZHUB_TOKEN", help="TAKER bearer token")
def quizzes(token: Optional[str]):
    """List published quizzes on the server at QUIZHUB_API_URL."""

    async def _list() -> list[dict]:
        async with _client(token) as c:
            r = await c.get("/api/quizzes")
            if r.status_code >= 400:
                body = r.json()
                click.secho(f"Error {r.status_code}: {body.get('message')}", fg="red", err=True)
                sys.exit(1)
            return r.json()

    rows = asyncio.run(_list())
    if not rows:
        click.echo("No published quizzes.")
        return
    _print_table(
        rows,
        [("ID", "id", 6), ("TITLE", "title", 40), ("QUESTIONS", "questionCount", 9)],
    )
