"""daybook CLI — list, show, write and delete journal entries."""

import click

from daybook import __version__

from .common import build_context


@click.group()
@click.version_option(version=__version__, package_name="daybook")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="YAML or JSON config file.")
@click.option("--data-dir", type=click.Path(file_okay=False), help="Where entries and logs are kept.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.pass_context
def main(ctx: click.Context, config_file: str | None, data_dir: str | None, log_level: str | None) -> None:
    """daybook — a small local journal."""
    ctx.obj = build_context(config_file, data_dir, log_level)


# Register subcommands
from .delete_cmd import delete
from .edit_cmd import edit, new
from .list_cmd import list_entries, show

main.add_command(list_entries)
main.add_command(show)
main.add_command(new)
main.add_command(edit)
main.add_command(delete)
