"""StickerJournal CLI: serve, entries, onboard, scan and weather commands."""

import click

from stickerjournal import __version__


@click.group()
@click.version_option(version=__version__, package_name="stickerjournal")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="YAML or JSON config file.")
@click.option("--log-level", default=None, help="Override logging.level (DEBUG, INFO, WARNING, ERROR).")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """StickerJournal: a local-first sticker journal."""
    from stickerjournal.core.cli.common import init_context

    init_context(ctx, config_file, log_level)


# Register subcommands (lazy imports keep startup fast)
from .entries_cmd import entries
from .onboard_cmd import onboard
from .scan_cmd import scan
from .serve_cmd import serve
from .weather_cmd import weather

main.add_command(serve)
main.add_command(entries)
main.add_command(onboard)
main.add_command(scan)
main.add_command(weather)
