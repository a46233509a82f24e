"""CLI for caching protein files and inspecting the cached records."""

from __future__ import annotations

import itertools
import logging
from typing import Optional

import typer
from tqdm import tqdm

from protein_core.events import MessageLevel, ProgressReporter
from protein_core.ingest import ProteinFileDataCache
from protein_core.schemas import CacheOptions
from summarizer.config import load_options, save_options

app = typer.Typer(help="Protein file data cache CLI")


class TqdmProgress:
    """Drives a percent-of-file tqdm bar from caching progress events."""

    def __init__(self, reporter: ProgressReporter, disable: bool = False) -> None:
        self.disable = disable
        self.bar: tqdm | None = None
        reporter.on_caching_start(self.start)
        reporter.on_progress(self.update)
        reporter.on_caching_complete(self.finish)

    def start(self) -> None:
        self.bar = tqdm(
            total=100.0,
            desc="Caching proteins",
            unit="%",
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {postfix}",
            disable=self.disable,
        )

    def update(self, proteins_cached: int, percent_processed: float) -> None:
        if self.bar is None:
            return
        self.bar.n = min(percent_processed, 100.0)
        self.bar.set_postfix_str(f"{proteins_cached:,} proteins")

    def finish(self) -> None:
        if self.bar is None:
            return
        self.bar.n = 100.0
        self.bar.refresh()
        self.bar.close()
        self.bar = None


@app.command()
def ingest(
    protein_file: str = typer.Argument(..., help="FASTA or delimited protein file"),
    config_path: Optional[str] = typer.Option(None, "--config", "-c", help="YAML options file"),
    keep_db: bool = typer.Option(False, "--keep-db", help="Keep the SQLite cache file"),
    assume_fasta: bool = typer.Option(False, "--assume-fasta", help="Read the file as FASTA"),
    assume_delimited: bool = typer.Option(
        False, "--assume-delimited", help="Read the file as delimited text"
    ),
    ignore_il: bool = typer.Option(False, "--ignore-il", help="Treat I and L as equivalent"),
    show: int = typer.Option(0, "--show", help="Print this many cached proteins"),
    start_id: Optional[int] = typer.Option(
        None, "--start-id", help="First UniqueSequenceID to print"
    ),
    end_id: Optional[int] = typer.Option(None, "--end-id", help="Last UniqueSequenceID to print"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide the progress bar"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
) -> None:
    """Cache a protein file and report what was stored."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        options = load_options(config_path) if config_path else CacheOptions()
    except FileNotFoundError as e:
        typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except Exception as e:
        typer.secho(f"❌ Unable to load config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    overrides: dict[str, object] = {}
    if keep_db:
        overrides["retain_store_file"] = True
    if assume_fasta:
        overrides["assume_fasta"] = True
    if assume_delimited:
        overrides["assume_delimited"] = True
    if ignore_il:
        overrides["unify_il"] = True
    if overrides:
        options = options.model_copy(update=overrides)

    reporter = ProgressReporter(options.progress_interval)
    TqdmProgress(reporter, disable=no_progress)
    cache = ProteinFileDataCache(options, progress=reporter)

    def echo_warning(message: str) -> None:
        typer.secho(f"⚠️  {message}", fg=typer.colors.YELLOW, err=True)

    cache.notifier.subscribe(MessageLevel.WARNING, echo_warning)

    with cache:
        result = cache.ingest(protein_file)
        if not result.success:
            typer.secho(f"❌ {result.message}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)

        typer.secho("✅ Proteins cached successfully!", fg=typer.colors.GREEN)
        typer.echo(f"   Proteins:   {result.record_count:,}")
        typer.echo(f"   Lines read: {result.lines_read:,}")
        typer.echo(f"   Cache file: {result.store_path}")

        if show > 0:
            if start_id is None and end_id is not None:
                start_id = 0
            records = cache.read(start_id, end_id)
            try:
                for record in itertools.islice(records, show):
                    typer.echo(
                        "\t".join(
                            [
                                str(record.unique_sequence_id),
                                record.name,
                                record.description,
                                record.sequence,
                            ]
                        )
                    )
            finally:
                records.close()


@app.command("init-config")
def init_config(
    yaml_path: str = typer.Argument(..., help="Where to write the default options"),
) -> None:
    """Write the default cache options as YAML."""
    save_options(CacheOptions(), yaml_path)
    typer.secho(f"✅ Default options written to {yaml_path}", fg=typer.colors.GREEN)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
