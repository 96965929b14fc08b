"""
Tests for store persistence: the SQLAlchemy repository and the debounced
writer.
"""

import asyncio
import logging
import time

import pytest

from falcon_http.config import AppConfig
from falcon_http.database import create_db_engine, create_session_factory, init_db
from falcon_http.exceptions import PersistenceError
from falcon_http.services.persistence import DebouncedWriter, StoreRepository, UnavailableRepository
from falcon_http.services.store import Store


@pytest.fixture
def repository(tmp_path):
    engine = create_db_engine(AppConfig(data_dir=tmp_path / "data"))
    init_db(engine)
    yield StoreRepository(create_session_factory(engine))
    engine.dispose()


class CountingRepository:
    """In-memory repository recording every saved snapshot."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved: list[dict] = []

    def save(self, snapshot):
        if self.fail:
            raise PersistenceError("disk full")
        self.saved.append(snapshot)


class SlowRepository(CountingRepository):
    """Repository whose saves block the worker thread for a while."""

    def __init__(self, seconds: float):
        super().__init__()
        self.seconds = seconds

    def save(self, snapshot):
        time.sleep(self.seconds)
        super().save(snapshot)


class TestStoreRepository:

    def test_load_before_first_save_is_none(self, repository):
        assert repository.load() is None

    def test_save_and_load(self, repository):
        store = Store()
        project = store.add_project("api")
        project.update_request_url("{{%PROJECT_BASE_URL%}}/users")
        env = store.create_env("dev")
        env.update_item_key(0, "HOST")

        repository.save(store.snapshot())
        loaded = repository.load()

        assert loaded.snapshot() == store.snapshot()
        assert loaded.active().name == "api"
        assert loaded.active_env().items == [("HOST", ""), ("", "")]

    def test_save_replaces_document(self, repository):
        store = Store()
        store.add_project("first")
        repository.save(store.snapshot())

        store.delete_project(store.projects[0].id)
        store.add_project("second")
        repository.save(store.snapshot())

        assert [p.name for p in repository.load().projects] == ["second"]

    def test_database_file_lives_in_data_dir(self, tmp_path):
        config = AppConfig(data_dir=tmp_path / "nested" / "dir")

        create_db_engine(config).dispose()

        assert config.data_dir.is_dir()
        assert config.database_url.endswith("falcon.db")

    def test_unavailable_repository_loads_nothing_and_fails_saves(self):
        repository = UnavailableRepository("Not a directory")

        assert repository.load() is None
        with pytest.raises(PersistenceError, match="Not a directory"):
            repository.save({"projects": [], "envs": []})


class TestDebouncedWriter:

    def test_burst_collapses_into_one_write(self):
        store = Store()
        repository = CountingRepository()
        writer = DebouncedWriter(store, repository, delay=0.05)

        async def scenario():
            for i in range(5):
                store.add_project(f"project {i}")
                writer.schedule()
                await asyncio.sleep(0.01)
            await asyncio.sleep(0.2)

        asyncio.run(scenario())

        assert len(repository.saved) == 1
        assert writer.writes == 1
        assert len(repository.saved[0]["projects"]) == 5

    def test_separate_bursts_write_separately(self):
        store = Store()
        repository = CountingRepository()
        writer = DebouncedWriter(store, repository, delay=0.02)

        async def scenario():
            writer.schedule()
            await asyncio.sleep(0.1)
            writer.schedule()
            await asyncio.sleep(0.1)

        asyncio.run(scenario())

        assert len(repository.saved) == 2

    def test_flush_writes_pending_edits_immediately(self):
        store = Store()
        repository = CountingRepository()
        writer = DebouncedWriter(store, repository, delay=10)

        async def scenario():
            store.add_project("api")
            writer.schedule()
            assert writer.pending
            await writer.flush()

        asyncio.run(scenario())

        assert len(repository.saved) == 1
        assert writer.pending is False

    def test_flush_without_pending_write_does_nothing(self):
        repository = CountingRepository()
        writer = DebouncedWriter(Store(), repository, delay=0.01)

        asyncio.run(writer.flush())

        assert repository.saved == []

    def test_reschedule_during_save_counts_both_writes(self):
        store = Store()
        repository = SlowRepository(seconds=0.05)
        writer = DebouncedWriter(store, repository, delay=0)

        async def scenario():
            writer.schedule()
            await asyncio.sleep(0.01)
            store.add_project("late edit")
            writer.schedule()
            await asyncio.sleep(0.3)

        asyncio.run(scenario())

        assert len(repository.saved) == 2
        assert writer.writes == 2
        assert sorted(len(s["projects"]) for s in repository.saved) == [0, 1]

    def test_flush_waits_for_save_in_progress(self):
        store = Store()
        repository = SlowRepository(seconds=0.05)
        writer = DebouncedWriter(store, repository, delay=0)

        async def scenario():
            writer.schedule()
            await asyncio.sleep(0.01)
            await writer.flush()

        asyncio.run(scenario())

        assert writer.writes == len(repository.saved) == 2

    def test_failed_write_is_logged_not_raised(self, caplog):
        store = Store()
        writer = DebouncedWriter(store, CountingRepository(fail=True), delay=0.01)

        async def scenario():
            writer.schedule()
            await asyncio.sleep(0.1)

        with caplog.at_level(logging.ERROR, logger="falcon_http"):
            asyncio.run(scenario())

        assert writer.writes == 0
        assert "disk full" in caplog.text
        assert store.snapshot() == {"projects": [], "envs": []}
