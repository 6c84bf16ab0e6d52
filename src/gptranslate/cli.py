from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator

import typer
from dotenv import load_dotenv

from gptranslate.config import Settings, build_settings, configured_providers
from gptranslate.dedup import DedupGate
from gptranslate.errors import ConfigurationError, DuplicateRequest, HistoryWriteError, ProviderError
from gptranslate.models import TranslationResponse
from gptranslate.orchestrator import TranslationService
from gptranslate.storage.history_store import HistoryStore

app = typer.Typer(help="gptranslate CLI")
history_app = typer.Typer(help="Inspect and maintain the translation history")
LOGGER = logging.getLogger(__name__)


def main() -> None:
    """Allow `python -m gptranslate` execution."""
    app()


@app.command("translate")
def translate(
    text: str = typer.Argument(..., help="Text to translate."),
    no_history: bool = typer.Option(False, "--no-history", help="Do not record the translation."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Detect the language of TEXT and translate it."""
    _configure_logging(verbose)
    settings = _load_settings()
    history = None if no_history else HistoryStore(settings.history_path)
    service = TranslationService(settings, gate=DedupGate(), history=history)
    try:
        response = asyncio.run(service.translate(text))
    except DuplicateRequest:
        typer.secho("Duplicate request ignored.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=0)
    except ProviderError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    except HistoryWriteError as exc:
        _print_response(exc.response)
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    _print_response(response)


@app.command("alternatives")
def alternatives(
    text: str = typer.Argument(..., help="Text to rephrase."),
    target: str = typer.Option(..., "--target", "-t", help="Language of the alternatives."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Suggest alternative phrasings of TEXT."""
    _configure_logging(verbose)
    settings = _load_settings()
    service = TranslationService(settings, gate=DedupGate())
    try:
        options = asyncio.run(service.get_alternatives(text, target))
    except ProviderError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    for index, option in enumerate(options, start=1):
        typer.echo(f"{index}. {option}")


@app.command("providers")
def providers(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """List providers that have credentials configured."""
    _configure_logging(verbose)
    settings = _load_settings()
    configured = configured_providers(settings)
    if not configured:
        typer.secho("No provider is configured.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    for name in configured:
        marker = "*" if name == settings.api_provider else " "
        typer.echo(f"{marker} {name}")


@history_app.command("list")
def history_list(
    limit: int = typer.Option(20, min=1, help="Number of entries to show."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Show the most recent translations."""
    _configure_logging(verbose)
    with _history_errors():
        entries = _history_store().entries()
    if not entries:
        typer.echo("History is empty.")
        return
    for entry in entries[:limit]:
        typer.echo(
            f"{entry.id}  {entry.timestamp.isoformat()}  "
            f"[{entry.detected_language} -> {entry.target_language}]  {_preview(entry.original_text)}"
        )


@history_app.command("delete")
def history_delete(
    entry_id: str = typer.Argument(..., help="Identifier of the entry to delete."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Delete one history entry."""
    _configure_logging(verbose)
    with _history_errors():
        deleted = _history_store().delete(entry_id)
    if not deleted:
        typer.secho(f"No history entry with id {entry_id}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted {entry_id}")


@history_app.command("clear")
def history_clear(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Remove every history entry."""
    _configure_logging(verbose)
    with _history_errors():
        _history_store().clear()
    typer.echo("History cleared.")


@history_app.command("dedupe")
def history_dedupe(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Collapse near-duplicate entries."""
    _configure_logging(verbose)
    with _history_errors():
        removed = _history_store().deduplicate()
    typer.echo(f"Removed {removed} near-duplicate entries.")


@history_app.command("fix-languages")
def history_fix_languages(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
) -> None:
    """Correct target languages that contradict the translated text."""
    _configure_logging(verbose)
    with _history_errors():
        fixed = _history_store().fix_target_languages()
    typer.echo(f"Corrected {fixed} entries.")


app.add_typer(history_app, name="history")


def _load_settings() -> Settings:
    load_dotenv()
    try:
        settings = build_settings()
    except ConfigurationError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    LOGGER.debug("Loaded settings: provider=%s history=%s", settings.api_provider, settings.history_path)
    return settings


def _history_store() -> HistoryStore:
    return HistoryStore(_load_settings().history_path)


@contextmanager
def _history_errors() -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError) as exc:
        typer.secho(f"History file error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _print_response(response: TranslationResponse) -> None:
    typer.echo(f"[{response.detected_language} -> {response.target_language}]")
    typer.echo(response.translated_text)


def _preview(text: str, width: int = 60) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= width else f"{flat[: width - 3]}..."


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")
