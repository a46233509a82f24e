"""Ownership of the cache file across ingest, read and disposal."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from protein_core.events import EventNotifier
from protein_core.schemas import DEFAULT_STORE_FILE_NAME, CacheStateError

from .paths import prepare_store_path
from .repository import ProteinStore
from .retry import DeletionRetryPolicy

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    UNRESOLVED = "unresolved"
    CREATED = "created"
    COMMITTED = "committed"
    CLOSED = "closed"
    DELETED = "deleted"
    RETAINED = "retained"


class StoreLifecycle:
    """Creates, commits, closes and disposes of one protein cache file.

    ``UNRESOLVED -> CREATED -> COMMITTED -> CLOSED -> DELETED | RETAINED``.
    Creating a store again from any later state first disposes of the
    previous file, so one file only ever backs one ingest run.
    """

    def __init__(
        self,
        file_name: str = DEFAULT_STORE_FILE_NAME,
        app_directory: str | Path | None = None,
        retain: bool = False,
        retry_policy: DeletionRetryPolicy | None = None,
        notifier: EventNotifier | None = None,
        remove_fn: Callable[[Path], None] | None = None,
    ) -> None:
        self.file_name = file_name
        self.app_directory = app_directory
        self.retain = retain
        self.retry_policy = retry_policy or DeletionRetryPolicy()
        self.notifier = notifier or EventNotifier(logger)
        self.remove_fn = remove_fn or os.remove
        self.state = StoreState.UNRESOLVED
        self.db_path: Path | None = None
        self._store: ProteinStore | None = None

    @property
    def store(self) -> ProteinStore | None:
        return self._store

    def create(self) -> ProteinStore:
        """Resolve a fresh path, create the schema and open the bulk insert."""
        if self.state != StoreState.UNRESOLVED:
            self.dispose("create", force=True)
            self.state = StoreState.UNRESOLVED

        self.db_path = prepare_store_path(self.file_name, self.app_directory)
        store = ProteinStore(self.db_path)
        try:
            store.open(disable_journaling=True)
            store.create_schema(replace=True)
            store.begin_bulk_insert()
        except Exception:
            store.close()
            raise
        self._store = store
        self.state = StoreState.CREATED
        return store

    def commit(self) -> int:
        store = self._require(StoreState.CREATED)
        count = store.commit()
        self.state = StoreState.COMMITTED
        return count

    def discard(self) -> None:
        """Drop the uncommitted rows; the empty store is still readable."""
        store = self._require(StoreState.CREATED)
        store.discard()
        self.state = StoreState.COMMITTED

    def reader(self) -> ProteinStore:
        return self._require(StoreState.COMMITTED)

    def close(self, calling_method: str = "close") -> None:
        if self._store is not None and self._store.is_open:
            self.notifier.on_debug(
                f"Closing persistent SQLite connection; calling method: {calling_method}"
            )
            self._store.close()
        if self.state in (StoreState.CREATED, StoreState.COMMITTED):
            self.state = StoreState.CLOSED

    def dispose(self, calling_method: str = "teardown", force: bool = False) -> None:
        """Close, then delete the file unless it is retained.

        ``force`` deletes a retained file as well. Never raises; a file that
        cannot be deleted is left in place with a warning.
        """
        self.close(calling_method)
        if self.state == StoreState.UNRESOLVED:
            return
        if self.retain and not force:
            self.notifier.on_debug(f"Retaining cache file {self.db_path}; not deleting it")
            self.state = StoreState.RETAINED
            return
        if self.delete_store_file(calling_method):
            self.state = StoreState.DELETED

    def delete_store_file(self, calling_method: str) -> bool:
        """Delete the backing file, retrying with backoff while it is locked."""
        path = self.db_path
        if path is None:
            self.notifier.on_debug(
                f"No cache file path defined; nothing to delete; calling method: {calling_method}"
            )
            return True
        if not path.exists():
            self.notifier.on_debug(
                f"Cache file doesn't exist; nothing to delete ({path}); calling method: {calling_method}"
            )
            return True

        policy = self.retry_policy
        policy.settle()

        for attempt in range(policy.max_attempts):
            try:
                if path.exists():
                    self.notifier.on_debug(f"Deleting {path}; calling method: {calling_method}")
                    self.remove_fn(path)
                if attempt > 0:
                    self.notifier.on_status(" --> File now successfully deleted")
                return True
            except OSError as e:
                if attempt > 0:
                    self.notifier.on_warning(
                        f"Error deleting {path} (calling method {calling_method}): {e}"
                    )
                else:
                    self.notifier.on_debug(f" ... unable to delete {path}: {e}")
            if attempt > 0 and attempt + 1 < policy.max_attempts:
                wait = policy.backoff_seconds(attempt)
                self.notifier.on_warning(f"  Waiting {wait} seconds, then trying again")
            policy.wait_after_failure(attempt)

        self.notifier.on_warning(
            f"Unable to delete {path} after {policy.max_attempts} attempts; leaving it in place"
        )
        return False

    def _require(self, state: StoreState) -> ProteinStore:
        if self.state != state or self._store is None:
            raise CacheStateError(
                f"Protein cache is {self.state.value}; expected {state.value}"
            )
        return self._store
