"""stickerjournal serve: run the HTTP API."""

from __future__ import annotations

import click


@click.command()
@click.option("--host", default=None, help="Bind address (defaults to server.host).")
@click.option("--port", type=int, default=None, help="Port (defaults to server.port).")
@click.option("--debug", is_flag=True, help="Enable Flask debug mode.")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, debug: bool) -> None:
    """Start the journal API and OCR proxy."""
    from stickerjournal.core.cli.common import get_config, load_state
    from stickerjournal.core.exceptions import ConfigurationError
    from stickerjournal.web.app import create_app

    config = get_config(ctx)
    try:
        server = config.validated().server
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    app = create_app(config=config, state=load_state(ctx))
    host = host or server.host
    port = port or server.port
    click.echo(f"Serving StickerJournal on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)
