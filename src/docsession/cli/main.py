# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""docsession CLI — session maintenance commands."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.table import Table

from docsession import __version__
from docsession.cli.console import console
from docsession.core.config import Config
from docsession.data.ports.outbound import DocumentCollection
from docsession.kernel.exceptions import ConfigurationException, DocumentStoreException
from docsession.logging.structlog_adapter import StructlogAdapter
from docsession.session.factory import create_session_store
from docsession.session.store import DocumentSessionStore

T = TypeVar("T")


def _load_config(config_path: str | None, profiles: tuple[str, ...]) -> Config:
    if config_path is None:
        return Config.from_sources(Path.cwd(), active_profiles=list(profiles))
    path = Path(config_path)
    if not path.is_file():
        console.print(f"[error]✗[/error] Config file '{config_path}' not found.")
        raise SystemExit(1)
    return Config.from_file(path, active_profiles=list(profiles))


def _run_with_store(ctx: click.Context, action: Callable[[DocumentSessionStore], Awaitable[T]]) -> T:
    """Build the configured store, run *action* against it, then release it.

    A collection placed in ``ctx.obj["collection"]`` is used instead of the
    configured connection and is left open.
    """
    config: Config = ctx.obj["config"]
    injected: DocumentCollection | None = ctx.obj.get("collection")

    async def _run() -> T:
        store = await create_session_store(config, collection=injected)
        try:
            return await action(store)
        finally:
            if injected is None:
                await store.repository.dispose()

    try:
        return asyncio.run(_run())
    except ConfigurationException as exc:
        console.print(f"[error]✗[/error] {exc}")
        raise SystemExit(1) from None
    except DocumentStoreException as exc:
        console.print(f"[error]✗ Document store error:[/error] {exc}")
        raise SystemExit(1) from None


def _format_value(value: Any) -> str:
    return json.dumps(value, default=str)


@click.group()
@click.version_option(__version__, package_name="docsession")
@click.option("--config", "config_path", default=None, help="Config file (default: docsession.yaml in the cwd).")
@click.option("--profile", "profiles", multiple=True, help="Active profile overlay; may be repeated.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, profiles: tuple[str, ...]) -> None:
    """docsession — document-backed session store maintenance."""
    ctx.ensure_object(dict)
    config = _load_config(config_path, profiles)
    StructlogAdapter().configure(config)
    ctx.obj["config"] = config


@cli.command("gc")
@click.option("--cutoff", default=None, type=int, help="Unix timestamp cutoff (default: now).")
@click.option("--dry-run", is_flag=True, help="Only count the sessions that would be removed.")
@click.pass_context
def gc_command(ctx: click.Context, cutoff: int | None, dry_run: bool) -> None:
    """Remove sessions whose expiry is before the cutoff."""
    if dry_run:
        effective = int(time.time()) if cutoff is None else cutoff
        count = _run_with_store(ctx, lambda store: store.repository.count_expired(effective))
        console.print(f"[info]{count}[/info] expired session(s) would be removed.")
        return

    removed = _run_with_store(ctx, lambda store: store.gc(cutoff))
    console.print(f"[success]✓[/success] Removed {removed} expired session(s).")


@cli.command("show")
@click.argument("session_id")
@click.pass_context
def show_command(ctx: click.Context, session_id: str) -> None:
    """Print a session's data without creating it."""
    entity = _run_with_store(ctx, lambda store: store.repository.find_by_id(session_id))
    if entity is None:
        console.print(f"[warning]No session '{session_id}'.[/warning]")
        raise SystemExit(1)

    expires = datetime.fromtimestamp(entity.expires, tz=UTC).isoformat()
    table = Table(title=f"Session {entity.id}", border_style="dim")
    table.add_column("Key", style="info")
    table.add_column("Value")
    for key, value in sorted(entity.session_data.items()):
        table.add_row(key, _format_value(value))
    console.print(table)
    console.print(f"[dim]expires: {entity.expires} ({expires})[/dim]")


@cli.command("destroy")
@click.argument("session_id")
@click.pass_context
def destroy_command(ctx: click.Context, session_id: str) -> None:
    """Delete one session document."""
    _run_with_store(ctx, lambda store: store.for_session(session_id).destroy())
    console.print(f"[success]✓[/success] Session '{session_id}' destroyed.")


def main() -> None:
    cli(obj={})
