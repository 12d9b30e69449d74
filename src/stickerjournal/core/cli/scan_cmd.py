"""stickerjournal scan: turn photos into journal entries."""

from __future__ import annotations

import click


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--server", default=None, help="Use a running server's /api/ocr instead of calling the model directly.")
@click.pass_context
def scan(ctx: click.Context, files: tuple[str, ...], server: str | None) -> None:
    """OCR each image and save it as a scanned entry."""
    from stickerjournal.core.cli.common import get_config, load_state
    from stickerjournal.scan.ocr import OCRClient
    from stickerjournal.scan.oracle import HttpOcrOracle, LocalOcrOracle
    from stickerjournal.scan.pipeline import ScanPhase, ScanPipeline

    state = load_state(ctx)
    oracle = HttpOcrOracle(server) if server else LocalOcrOracle(OCRClient.from_config(get_config(ctx)))
    pipeline = ScanPipeline(oracle, on_commit=state.commit_scanned, id_factory=state.entries.next_id)

    results = pipeline.scan_files(files)
    failed = not results or any(result.phase is ScanPhase.FAILED for result in results)
    for result in results:
        suffix = f" (entry {result.entry_id})" if result.entry_id is not None else ""
        click.echo(f"{result.message}{suffix}")
    if not results:
        click.echo(pipeline.state.message)
    if failed:
        ctx.exit(1)
