"""daybook new / edit — write through an editing session.

Both commands go through the same path as an interactive editor: navigate
to ``edit/{id}``, change the buffer, navigate back. Leaving the editor
runs the session's save-or-delete reconciliation, so a new entry left
blank is discarded.
"""

from __future__ import annotations

import asyncio

import click

from daybook.journal.models import Entry
from daybook.journal.navigation import Navigator, edit_route
from daybook.journal.presentation import LOADING_MESSAGE
from daybook.journal.reconciler import ReconcileOutcome
from daybook.journal.session import SessionManager

from .common import CliContext, join_editor_text, split_editor_text

_OUTCOME_MESSAGES = {
    ReconcileOutcome.SAVED: "Saved entry {id}.",
    ReconcileOutcome.DELETED: "Discarded empty entry {id}.",
    ReconcileOutcome.UNCHANGED: "No changes to entry {id}.",
    ReconcileOutcome.SKIPPED: "Entry {id} was not loaded.",
}


async def _write(ctx: CliContext, entry_id: int | None, title: str | None, content: str | None) -> str:
    repository = await ctx.open_repository()
    sessions = SessionManager(repository, ctx.autosave)
    navigator = Navigator(sessions)
    try:
        if entry_id is None:
            entry_id = await repository.insert(Entry(is_draft=True))
        session = await navigator.navigate(edit_route(entry_id))
        if session is None or session.is_loading:
            await navigator.pop_back()
            raise click.ClickException(f"Entry {entry_id}: {LOADING_MESSAGE}")

        if title is None and content is None:
            edited = click.edit(join_editor_text(session.title, session.content), extension=".md")
            if edited is not None:
                title, content = split_editor_text(edited)
        session.edit(title=title, content=content)

        await navigator.pop_back()
        outcome = sessions.last_outcome or ReconcileOutcome.SKIPPED
    finally:
        await sessions.shutdown()

    if session.write_errors:
        raise click.ClickException("; ".join(session.write_errors))
    return _OUTCOME_MESSAGES[outcome].format(id=entry_id)


@click.command()
@click.option("--title", "-t", help="Entry title.")
@click.option("--content", "-c", help="Entry text.")
@click.pass_obj
def new(ctx: CliContext, title: str | None, content: str | None) -> None:
    """Write a new entry (opens $EDITOR without options)."""
    click.echo(asyncio.run(_write(ctx, None, title, content)))


@click.command()
@click.argument("entry_id", type=int)
@click.option("--title", "-t", help="New title.")
@click.option("--content", "-c", help="New text.")
@click.pass_obj
def edit(ctx: CliContext, entry_id: int, title: str | None, content: str | None) -> None:
    """Edit an entry (opens $EDITOR without options)."""
    click.echo(asyncio.run(_write(ctx, entry_id, title, content)))
