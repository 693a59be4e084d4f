"""daybook delete — remove an entry after confirmation."""

from __future__ import annotations

import asyncio

import click

from daybook.core.exceptions import EntryNotFoundError

from .common import CliContext


@click.command()
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Delete without asking.")
@click.pass_obj
def delete(ctx: CliContext, entry_id: int, yes: bool) -> None:
    """Delete an entry."""

    async def _delete() -> str:
        repository = await ctx.open_repository()
        entry = await repository.require(entry_id)
        if not yes and not click.confirm(f"Delete entry? #{entry.id} {entry.title}".rstrip()):
            return "Cancelled."
        await repository.delete(entry)
        return f"Deleted entry {entry.id}."

    try:
        click.echo(asyncio.run(_delete()))
    except EntryNotFoundError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1) from None
