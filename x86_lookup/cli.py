"""Command-line interface for x86-lookup."""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .cache import document_identity
from .errors import MnemonicNotFound, X86LookupError
from .logging import get_logger
from .runtime import Runtime, build_runtime
from .viewers import ViewerDispatcher

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Jump to x86 instructions in the Intel SDM")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    pdf: Optional[Path] = typer.Option(
        None,
        "--pdf",
        help="Intel SDM PDF (overrides X86_LOOKUP_PDF)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    ctx.obj = {"pdf": pdf}


@app.command("open")
def open_command(
    ctx: typer.Context,
    mnemonic: str = typer.Argument(..., help="Instruction mnemonic, e.g. movdqa"),
    viewer: Optional[str] = typer.Option(
        None,
        "--viewer",
        help="Use only this viewer instead of the configured list",
    ),
) -> None:
    with _runtime(ctx) as runtime:
        page = _resolve_or_exit(runtime, mnemonic)
        dispatcher = runtime.dispatcher
        if viewer:
            dispatcher = _guard(lambda: ViewerDispatcher.from_names([viewer]))
        pdf_path = runtime.session.pdf_path
        name = _guard(lambda: dispatcher.open(pdf_path, page))
        typer.echo(f"{mnemonic.lower()}: page {page} ({name})")


@app.command("page")
def page_command(
    ctx: typer.Context,
    mnemonic: str = typer.Argument(..., help="Instruction mnemonic"),
) -> None:
    with _runtime(ctx) as runtime:
        typer.echo(str(_resolve_or_exit(runtime, mnemonic)))


@app.command("list")
def list_command(
    ctx: typer.Context,
    prefix: str = typer.Argument("", help="Only list mnemonics starting with this"),
) -> None:
    with _runtime(ctx) as runtime:
        for mnemonic in _guard(lambda: runtime.session.mnemonics(prefix)):
            typer.echo(mnemonic)


@app.command("rebuild")
def rebuild_command(ctx: typer.Context) -> None:
    with _runtime(ctx) as runtime:
        index = _guard(runtime.session.reload)
        typer.echo(f"Indexed {len(index)} mnemonics from {index.page_count} pages")


@app.command("clear-cache")
def clear_cache_command(
    ctx: typer.Context,
    all_entries: bool = typer.Option(False, "--all", help="Remove every cached index"),
) -> None:
    with _runtime(ctx) as runtime:
        if all_entries:
            removed = runtime.cache.clear()
        else:
            pdf_path = _guard(runtime.config.require_pdf)
            removed = runtime.cache.clear(document_identity(pdf_path))
        typer.echo(f"Removed {removed} cache file(s) from {runtime.cache.root}")


def _runtime(ctx: typer.Context) -> closing[Runtime]:
    pdf = (ctx.obj or {}).get("pdf")
    return closing(_guard(lambda: build_runtime(pdf_path=pdf)))


def _resolve_or_exit(runtime: Runtime, mnemonic: str) -> int:
    try:
        return _guard(lambda: runtime.session.resolve(mnemonic))
    except MnemonicNotFound as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _guard(action):
    """Run ``action`` and turn fatal lookup errors into a one-line exit."""
    try:
        return action()
    except MnemonicNotFound:
        raise
    except X86LookupError as exc:
        logger.debug("command_failed", error=str(exc), kind=type(exc).__name__)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
