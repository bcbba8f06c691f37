"""
Golink storage strategies using Strategy Pattern.

Two interchangeable backends behind one contract:
- InMemoryGolinkStorage: volatile, process-local dict
- SQLiteGolinkStorage: durable, survives restarts

Both expose the same CRUD, listing and pagination semantics, the same
ordering (newest created_at first) and the same error classification.
"""

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Tuple

from sqlalchemy import delete, func, literal_column, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from golink_app.database.connection import (
    Base,
    create_session_factory,
    create_sqlite_engine,
    resolve_database_path,
)
from golink_app.models.golink import GolinkRecord
from .exceptions import AlreadyExistsError, BackendFaultError, StorageNotFoundError
from .models import Golink, format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def clamp_pagination(page: int, page_size: int) -> Tuple[int, int, int]:
    """
    Normalize pagination input.

    Returns:
        (page, page_size, offset) with page >= 1 and page_size in [1, MAX_PAGE_SIZE]
    """
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
    return page, page_size, (page - 1) * page_size


class GolinkStorage(ABC):
    """
    Abstract base class for golink storage strategies.

    This is the Strategy Pattern interface - the service layer talks only
    to this contract and never knows which backend it was given.

    All methods are async for interface consistency; every method must be
    safe to call concurrently from many requests.
    """

    @abstractmethod
    async def create(self, golink: Golink) -> None:
        """
        Store a new golink.

        The existence check and the insert happen as one atomic unit.

        Raises:
            AlreadyExistsError: short_link is already stored
            BackendFaultError: lower-level failure
        """
        pass

    @abstractmethod
    async def get(self, short_link: str) -> Golink:
        """
        Get a golink by its short_link.

        Raises:
            StorageNotFoundError: no such golink
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Golink]:
        """Get every golink, newest created_at first"""
        pass

    @abstractmethod
    async def get_paginated(self, page: int, page_size: int) -> Tuple[List[Golink], int]:
        """
        Get one page of the full listing.

        Args:
            page: 1-based page number (clamped to >= 1)
            page_size: items per page (clamped to [1, 100])

        Returns:
            (items on this page, total number of golinks). Past the last
            page the item list is empty but the total is still correct.
        """
        pass

    @abstractmethod
    async def update(self, short_link: str, url: str) -> Golink:
        """
        Replace the destination URL of an existing golink.

        Raises:
            StorageNotFoundError: no such golink
        """
        pass

    @abstractmethod
    async def delete(self, short_link: str) -> None:
        """
        Delete a golink permanently.

        Raises:
            StorageNotFoundError: no such golink
        """
        pass

    @abstractmethod
    async def exists(self, short_link: str) -> bool:
        """Check whether a golink is stored under short_link"""
        pass

    async def close(self) -> None:
        """Release backend resources (no-op by default)"""
        pass


class ReadWriteLock:
    """
    Reader/writer lock: readers share, writers are exclusive.

    Waiting writers hold back new readers so a steady stream of reads
    cannot starve a write.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryGolinkStorage(GolinkStorage):
    """
    In-memory golink storage using a Python dict.

    Pros:
    - Very fast (no I/O)
    - No setup, good for development and testing

    Cons:
    - Lost on restart
    - Bounded by process memory (listing sorts everything on each call)

    One ReadWriteLock covers the whole key space. Every write runs its
    check-then-act sequence inside a single exclusive section.
    Entities are copied in and out so stored state only changes under the lock.
    """

    def __init__(self):
        self._golinks: Dict[str, Golink] = {}
        self._lock = ReadWriteLock()

    def _sorted_snapshot(self) -> List[Golink]:
        # dict keeps insertion order; reversing it makes ties list newest insert first
        with self._lock.read_locked():
            values = [golink.model_copy() for golink in reversed(self._golinks.values())]
        return sorted(values, key=lambda golink: golink.created_at, reverse=True)

    async def create(self, golink: Golink) -> None:
        with self._lock.write_locked():
            if golink.short_link in self._golinks:
                raise AlreadyExistsError(golink.short_link)
            self._golinks[golink.short_link] = golink.model_copy()

    async def get(self, short_link: str) -> Golink:
        with self._lock.read_locked():
            golink = self._golinks.get(short_link)
            if golink is None:
                raise StorageNotFoundError(short_link)
            return golink.model_copy()

    async def get_all(self) -> List[Golink]:
        return self._sorted_snapshot()

    async def get_paginated(self, page: int, page_size: int) -> Tuple[List[Golink], int]:
        page, page_size, offset = clamp_pagination(page, page_size)
        golinks = self._sorted_snapshot()
        total = len(golinks)
        if offset >= total:
            return [], total
        return golinks[offset:offset + page_size], total

    async def update(self, short_link: str, url: str) -> Golink:
        with self._lock.write_locked():
            golink = self._golinks.get(short_link)
            if golink is None:
                raise StorageNotFoundError(short_link)
            updated = golink.model_copy(update={"url": url})
            self._golinks[short_link] = updated
            return updated.model_copy()

    async def delete(self, short_link: str) -> None:
        with self._lock.write_locked():
            if short_link not in self._golinks:
                raise StorageNotFoundError(short_link)
            del self._golinks[short_link]

    async def exists(self, short_link: str) -> bool:
        with self._lock.read_locked():
            return short_link in self._golinks


def _to_golink(record: GolinkRecord) -> Golink:
    return Golink(
        id=record.id,
        short_link=record.short_link,
        url=record.url,
        created_at=parse_timestamp(record.created_at),
    )


def _is_short_link_violation(error: IntegrityError) -> bool:
    # sqlite3 reports "UNIQUE constraint failed: golinks.short_link"
    return "golinks.short_link" in str(error.orig)


class SQLiteGolinkStorage(GolinkStorage):
    """
    SQLite implementation for golink storage (via SQLAlchemy).

    Pros:
    - Durable across restarts
    - Zero configuration (single file)
    - Uniqueness enforced by the engine itself

    Cons:
    - Single writer at a time (WAL keeps readers unblocked)
    - get_paginated runs the page query and the count query separately,
      so under concurrent writes the total can briefly disagree with the page

    Use case:
    - Default backend for a single-node deployment
    """

    def __init__(self, database_path: str = "./data/golinks.db"):
        """
        Open (and if needed create) the SQLite database.

        Args:
            database_path: Path to the SQLite file; resolved to an absolute
                path, missing parent directories are created

        Raises:
            BackendFaultError: the database could not be opened or the
                table could not be created
        """
        try:
            self.database_path = resolve_database_path(database_path)
            self.engine = create_sqlite_engine(self.database_path)
            Base.metadata.create_all(self.engine)
        except (OSError, SQLAlchemyError) as e:
            raise BackendFaultError(
                f"Failed to initialize SQLite storage at {database_path}: {e}"
            ) from e
        self._session_factory = create_session_factory(self.engine)
        logger.info("✅ SQLite golink storage initialized at %s", self.database_path)

    def _ordered(self):
        return select(GolinkRecord).order_by(
            GolinkRecord.created_at.desc(),
            literal_column("rowid").desc(),
        )

    async def create(self, golink: Golink) -> None:
        record = GolinkRecord(
            id=golink.id,
            short_link=golink.short_link,
            url=golink.url,
            created_at=format_timestamp(golink.created_at),
        )
        try:
            with self._session_factory() as session:
                session.add(record)
                session.commit()
        except IntegrityError as e:
            if _is_short_link_violation(e):
                raise AlreadyExistsError(golink.short_link) from e
            raise BackendFaultError(str(e)) from e
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e

    async def get(self, short_link: str) -> Golink:
        try:
            with self._session_factory() as session:
                record = session.execute(
                    select(GolinkRecord).where(GolinkRecord.short_link == short_link)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e

        if record is None:
            raise StorageNotFoundError(short_link)
        return _to_golink(record)

    async def get_all(self) -> List[Golink]:
        try:
            with self._session_factory() as session:
                records = session.execute(self._ordered()).scalars().all()
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e
        return [_to_golink(record) for record in records]

    async def get_paginated(self, page: int, page_size: int) -> Tuple[List[Golink], int]:
        page, page_size, offset = clamp_pagination(page, page_size)
        try:
            with self._session_factory() as session:
                records = session.execute(
                    self._ordered().limit(page_size).offset(offset)
                ).scalars().all()
                # Separate read: not a snapshot with the page above
                total = session.execute(
                    select(func.count()).select_from(GolinkRecord)
                ).scalar_one()
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e

        if offset >= total:
            return [], total
        return [_to_golink(record) for record in records], total

    async def update(self, short_link: str, url: str) -> Golink:
        try:
            with self._session_factory() as session:
                result = session.execute(
                    update(GolinkRecord)
                    .where(GolinkRecord.short_link == short_link)
                    .values(url=url)
                )
                if result.rowcount == 0:
                    session.rollback()
                    raise StorageNotFoundError(short_link)
                record = session.execute(
                    select(GolinkRecord).where(GolinkRecord.short_link == short_link)
                ).scalar_one()
                golink = _to_golink(record)
                session.commit()
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e
        return golink

    async def delete(self, short_link: str) -> None:
        try:
            with self._session_factory() as session:
                result = session.execute(
                    delete(GolinkRecord).where(GolinkRecord.short_link == short_link)
                )
                if result.rowcount == 0:
                    session.rollback()
                    raise StorageNotFoundError(short_link)
                session.commit()
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e

    async def exists(self, short_link: str) -> bool:
        try:
            with self._session_factory() as session:
                count = session.execute(
                    select(func.count())
                    .select_from(GolinkRecord)
                    .where(GolinkRecord.short_link == short_link)
                ).scalar_one()
        except SQLAlchemyError as e:
            raise BackendFaultError(str(e)) from e
        return count > 0

    async def close(self) -> None:
        self.engine.dispose()
