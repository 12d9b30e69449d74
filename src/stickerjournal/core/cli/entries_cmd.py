"""stickerjournal entries: list saved entries."""

from __future__ import annotations

import json

import click


@click.command()
@click.option("--query", "-q", default="", help="Case-insensitive text filter.")
@click.option("--date", "date_key", default=None, help="Only entries on this day (YYYY-MM-DD).")
@click.option("--json", "as_json", is_flag=True, help="Print raw entry records.")
@click.pass_context
def entries(ctx: click.Context, query: str, date_key: str | None, as_json: bool) -> None:
    """List entries, newest first."""
    from stickerjournal.core.cli.common import load_state
    from stickerjournal.core.utils.text import truncate_text

    state = load_state(ctx)
    state.set_query(query)
    try:
        state.select_date(date_key)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date") from e

    visible = state.visible_entries()
    if as_json:
        click.echo(json.dumps([entry.to_record() for entry in visible], ensure_ascii=False, indent=2))
        return
    if not visible:
        click.echo("No entries found.")
        return
    for entry in visible:
        badges = " ".join(badge.label for badge in entry.badges)
        click.echo(f"{entry.id}  {entry.date_label:<13} {entry.title}  [{badges}]")
        click.echo(f"    {truncate_text(entry.content.replace(chr(10), ' '), 72)}")
