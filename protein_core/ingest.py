"""Load a protein FASTA or delimited file into the SQLite protein cache."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

from protein_io.base import ProteinFileReader
from protein_io.fasta import FastaFileReader
from protein_io.selection import create_reader
from store.lifecycle import StoreLifecycle, StoreState
from store.retry import DeletionRetryPolicy

from .events import EventNotifier, ProgressReporter
from .normalization import SequenceNormalizer
from .schemas import CacheOptions, IngestErrorKind, IngestResult, ProteinRecord

logger = logging.getLogger(__name__)


class ProteinFileDataCache:
    """Reads a protein file once and serves the proteins from a SQLite cache.

    ``ingest`` never raises: failures are published as error events and
    reported through the returned :class:`IngestResult`.
    """

    def __init__(
        self,
        options: CacheOptions | None = None,
        progress: ProgressReporter | None = None,
        notifier: EventNotifier | None = None,
        retry_policy: DeletionRetryPolicy | None = None,
        lifecycle: StoreLifecycle | None = None,
    ) -> None:
        self.options = options or CacheOptions()
        self.notifier = notifier or EventNotifier(logger)
        self.progress = progress or ProgressReporter(self.options.progress_interval)
        if self.progress.notifier is None:
            self.progress.notifier = self.notifier
        self.lifecycle = lifecycle or StoreLifecycle(
            file_name=self.options.store_file_name,
            app_directory=self.options.store_directory,
            retain=self.options.retain_store_file,
            retry_policy=retry_policy,
            notifier=self.notifier,
        )
        self.normalizer = SequenceNormalizer.from_options(self.options)
        self.parsed_file_is_fasta: bool | None = None
        self._record_count = 0

    @property
    def store_path(self) -> Path | None:
        return self.lifecycle.db_path

    @property
    def state(self) -> StoreState:
        return self.lifecycle.state

    def record_count(self) -> int:
        return self._record_count

    def ingest(self, protein_file_path: str | Path | None) -> IngestResult:
        if protein_file_path is None or not str(protein_file_path).strip():
            return self._input_error("Empty protein input file path")

        path = Path(protein_file_path)
        reader = create_reader(path, self.options)
        self.parsed_file_is_fasta = isinstance(reader, FastaFileReader)

        if not path.is_file():
            return self._input_error(f"Protein input file not found: {path}")
        if not reader.open_file(path):
            return self._input_error(f"Error opening protein input file: {path}")

        try:
            return self._cache_entries(path, reader)
        finally:
            reader.close_file()

    def _cache_entries(self, path: Path, reader: ProteinFileReader) -> IngestResult:
        self._record_count = 0
        try:
            store = self.lifecycle.create()
        except Exception as e:  # noqa: BLE001
            self.notifier.on_error(f"Unable to create the protein cache for {path}: {e}", e)
            return IngestResult(
                success=False,
                error_kind=IngestErrorKind.INGEST,
                message=f"Unable to create the protein cache: {e}",
            )

        self.progress.caching_started()
        count = 0
        try:
            while reader.read_next_entry():
                store.insert(
                    ProteinRecord(
                        name=reader.name,
                        description=reader.description,
                        sequence=self.normalizer(reader.sequence),
                        unique_sequence_id=count,
                        percent_coverage=0.0,
                    )
                )
                count += 1
                self.progress.record_cached(count, reader.percent_file_processed)
            if reader.last_error is not None:
                return self._ingest_error(path, reader, reader.last_error)
            self._record_count = self.lifecycle.commit()
        except Exception as e:  # noqa: BLE001
            return self._ingest_error(path, reader, e)

        self.progress.caching_complete()
        self.notifier.on_status(
            f"Done: Processed {self._record_count:,} proteins ({reader.lines_read:,} lines)"
        )
        return IngestResult(
            success=True,
            record_count=self._record_count,
            lines_read=reader.lines_read,
            store_path=str(self.store_path),
            message=f"Cached {self._record_count} proteins",
        )

    def _ingest_error(self, path: Path, reader: ProteinFileReader, exc: Exception) -> IngestResult:
        message = f"Error reading protein input file ({path}): {exc}"
        self.notifier.on_error(message, exc)
        partial = False
        try:
            if self.options.commit_partial_on_error:
                self._record_count = self.lifecycle.commit()
                partial = True
                self.notifier.on_warning(
                    f"Kept {self._record_count} proteins cached before the error; "
                    "the cache is incomplete"
                )
            else:
                self.lifecycle.discard()
                self._record_count = 0
        except Exception as cleanup_error:  # noqa: BLE001
            self.notifier.on_warning(f"Unable to finalize the protein cache: {cleanup_error}")
            self._record_count = 0
            try:
                self.lifecycle.close("ingest")
            except Exception as close_error:  # noqa: BLE001
                self.notifier.on_warning(f"Error closing the protein cache: {close_error}")
        return IngestResult(
            success=False,
            record_count=self._record_count,
            lines_read=reader.lines_read,
            store_path=str(self.store_path) if self.store_path else None,
            error_kind=IngestErrorKind.INGEST,
            message=message,
            partial=partial,
        )

    def _input_error(self, message: str) -> IngestResult:
        self.notifier.on_error(message)
        self._record_count = 0
        return IngestResult(success=False, error_kind=IngestErrorKind.INPUT, message=message)

    def read(
        self, start_id: int | None = None, end_id: int | None = None
    ) -> Generator[ProteinRecord, None, None]:
        """Stream cached proteins ordered by UniqueSequenceID.

        ``start_id`` alone returns every record from that ID on; both bounds
        give an inclusive range. Close the iterator when abandoning it early.
        """
        store = self.lifecycle.reader()
        return store.read(start_id, end_id)

    def update_percent_coverage(self, unique_sequence_id: int, percent_coverage: float) -> bool:
        return self.lifecycle.reader().update_percent_coverage(unique_sequence_id, percent_coverage)

    def teardown(self, force_delete: bool = False) -> None:
        try:
            self.lifecycle.dispose("teardown", force=force_delete)
        except Exception as e:  # noqa: BLE001
            self.notifier.on_warning(f"Error disposing of the protein cache: {e}")

    def __enter__(self) -> "ProteinFileDataCache":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()
