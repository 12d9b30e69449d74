"""stickerjournal onboard: create the local profile."""

from __future__ import annotations

import click


@click.command()
@click.argument("name")
@click.option(
    "--gender",
    type=click.Choice(["male", "female", "other"]),
    default="other",
    show_default=True,
)
@click.pass_context
def onboard(ctx: click.Context, name: str, gender: str) -> None:
    """Save your profile and print today's greeting."""
    from stickerjournal.core.cli.common import load_state
    from stickerjournal.journal.onboarding import complete_onboarding, greeting

    state = load_state(ctx)
    profile = complete_onboarding(state, name, gender)
    if profile is None:
        raise click.BadParameter("Name must not be blank.", param_hint="NAME")
    click.echo(greeting(profile))
