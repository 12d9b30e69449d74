"""Shared setup logic for CLI commands."""

from __future__ import annotations

import click


def init_context(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """Load config and configure logging once per invocation."""
    from stickerjournal.core.config import Config
    from stickerjournal.core.utils.logging import setup_logging

    config = Config(config_file=config_file)
    setup_logging(
        level=log_level or config.get("logging.level", "WARNING"),
        log_file=config.get("logging.file") or None,
    )
    ctx.obj = {"config": config}


def get_config(ctx: click.Context):
    obj = ctx.find_root().obj or {}
    if "config" not in obj:
        from stickerjournal.core.config import Config

        obj["config"] = Config()
        ctx.find_root().obj = obj
    return obj["config"]


def load_state(ctx: click.Context):
    """AppState over the configured on-disk store."""
    from stickerjournal.web.app import build_state

    config = get_config(ctx)
    config.ensure_directories()
    return build_state(config)
