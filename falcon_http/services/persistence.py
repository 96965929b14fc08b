"""
Store persistence.

The whole store is saved as one document row. Writes are debounced: every
mutation reschedules a single timer, and the snapshot is written once the
store has been quiet for the configured delay.
"""

import asyncio
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import PersistenceError
from ..logger import LOGGER
from ..models.document import DOCUMENT_ID, StoreDocument
from .store import Store


log = LOGGER.getChild("persistence")


class StoreRepository:
    """Loads and saves the store document through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def load(self) -> Store | None:
        """
        Read the persisted store.

        Returns:
            The store, or None when nothing has been saved yet

        Raises:
            PersistenceError: if the row cannot be read or parsed
        """
        try:
            with self.session_factory() as db:
                document = db.get(StoreDocument, DOCUMENT_ID)
                if document is None:
                    return None
                return Store.from_document(document.to_dict())
        except (SQLAlchemyError, PydanticValidationError) as e:
            raise PersistenceError(f"Unable to load store: {e}") from e

    def save(self, snapshot: dict[str, Any]) -> None:
        """
        Replace the persisted document with snapshot in one transaction.

        Raises:
            PersistenceError: if the write fails
        """
        try:
            with self.session_factory() as db:
                document = db.scalars(
                    select(StoreDocument).where(StoreDocument.id == DOCUMENT_ID)
                ).first()
                if document is None:
                    document = StoreDocument(id=DOCUMENT_ID)
                    db.add(document)
                document.projects = snapshot["projects"]
                document.envs = snapshot["envs"]
                db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save store, cause {e}") from e


class DebouncedWriter:
    """
    Single-slot debounce timer for store snapshots.

    ``schedule`` replaces any pending timer, so a burst of edits produces
    one write roughly ``delay`` seconds after the last edit. ``flush``
    writes immediately and is called on shutdown.
    """

    def __init__(self, store: Store, repository: StoreRepository, delay: float = 0.5):
        self.store = store
        self.repository = repository
        self.delay = delay
        self.writes = 0
        self._task: asyncio.Task | None = None
        self._saving: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self) -> None:
        """Restart the timer. Must run on the event loop."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._write_later())

    async def _write_later(self) -> None:
        await asyncio.sleep(self.delay)
        # A reschedule during the save cancels this task, not the save
        self._saving = asyncio.get_running_loop().create_task(self._write())
        await asyncio.shield(self._saving)

    async def _write(self) -> None:
        # Snapshot on the loop, write in a worker thread
        snapshot = self.store.snapshot()
        try:
            await asyncio.to_thread(self.repository.save, snapshot)
        except PersistenceError as e:
            log.error("DB: %s", e)
        else:
            self.writes += 1
            log.debug("Store saved (%d projects, %d envs)", len(snapshot["projects"]), len(snapshot["envs"]))

    async def flush(self) -> None:
        """Cancel the pending timer and write now if one was pending."""
        if not self.pending:
            return
        self._task.cancel()
        self._task = None
        if self._saving is not None and not self._saving.done():
            await self._saving
        await self._write()


class UnavailableRepository:
    """
    Stand-in used when the database could not be opened at startup.

    Nothing is loaded and every save fails with the startup error, which
    the debounced writer logs. The in-memory store keeps working.
    """

    def __init__(self, reason: str):
        self.reason = reason

    def load(self) -> Store | None:
        return None

    def save(self, snapshot: dict[str, Any]) -> None:
        raise PersistenceError(f"Database unavailable: {self.reason}")
