"""daybook list / show — read-only views of the journal."""

from __future__ import annotations

import asyncio

import click

from daybook.core.exceptions import EntryNotFoundError
from daybook.journal.presentation import format_entry_card, format_entry_list, last_change_label

from .common import CliContext


@click.command("list")
@click.pass_obj
def list_entries(ctx: CliContext) -> None:
    """List entries, newest first."""

    async def _list() -> str:
        repository = await ctx.open_repository()
        return format_entry_list(repository.all_entries().value or [])

    click.echo(asyncio.run(_list()))


@click.command()
@click.argument("entry_id", type=int)
@click.pass_obj
def show(ctx: CliContext, entry_id: int) -> None:
    """Show a single entry."""

    async def _show() -> str:
        repository = await ctx.open_repository()
        entry = await repository.require(entry_id)
        return f"{format_entry_card(entry)}\n{last_change_label(entry.timestamp)}"

    try:
        click.echo(asyncio.run(_show()))
    except EntryNotFoundError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1) from None
