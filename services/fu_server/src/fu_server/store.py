from __future__ import annotations

import datetime as dt
import logging
import os
from pathlib import Path
from typing import BinaryIO, Callable

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .db import init_db, make_engine, make_session_factory
from .errors import (
    BlobDeleteError,
    BlobReadError,
    BlobWriteError,
    CatalogError,
    CommitError,
    ConfigError,
    DuplicateName,
)
from .models import StoredObject
from .names import NameGenerator
from .sweeper import ExpirySweeper

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB


def utcnow() -> dt.datetime:
    """Naive UTC, the form SQLite hands back."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class ObjectStore:
    """Catalog of expiring files plus the directory holding their blobs.

    A row is committed only after its blob is fully written, and a row is
    deleted only after its blob is confirmed gone.
    """

    def __init__(
        self,
        db_url: str,
        upload_dir: str | Path,
        names: NameGenerator | None = None,
        clock: Callable[[], dt.datetime] = utcnow,
        name_attempts: int = 3,
    ):
        if name_attempts < 1:
            raise ValueError("name_attempts must be >= 1")
        self.db_url = db_url
        self.upload_dir = Path(upload_dir)
        self.names = names or NameGenerator()
        self.clock = clock
        self.name_attempts = name_attempts
        self._engine = None
        self._session_factory = None
        self._sweeper: ExpirySweeper | None = None

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ObjectStore":
        return cls(
            db_url=settings.db_url,
            upload_dir=settings.upload_dir,
            name_attempts=settings.name_attempts,
            **kwargs,
        )

    def open(self) -> "ObjectStore":
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"cannot create upload dir {self.upload_dir}: {e}") from e

        try:
            engine = make_engine(self.db_url)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            init_db(engine)
        except SQLAlchemyError as e:
            raise ConfigError(f"catalog unavailable at {self.db_url}: {e}") from e

        self._engine = engine
        self._session_factory = make_session_factory(engine)
        logger.info("Object store ready: catalog=%s upload_dir=%s", self.db_url, self.upload_dir)
        return self

    def _session(self):
        if self._session_factory is None:
            raise CatalogError("object store is not open")
        return self._session_factory()

    def blob_path(self, name: str) -> Path:
        return self.upload_dir / name

    def put(self, stream: BinaryIO, lifetime: dt.timedelta, extension: str = "") -> StoredObject:
        """Store ``stream`` under a fresh random name for ``lifetime``.

        Collisions are detected before the stream is read, so the name is
        regenerated up to ``name_attempts`` times.
        """
        if lifetime <= dt.timedelta(0):
            raise ValueError("lifetime must be positive")
        if "/" in extension or os.sep in extension:
            raise ValueError(f"invalid extension: {extension!r}")

        last: DuplicateName | None = None
        for attempt in range(1, self.name_attempts + 1):
            try:
                return self._put_once(stream, lifetime, extension)
            except DuplicateName as e:
                logger.warning("Name collision on %s (attempt %d/%d)", e.name, attempt, self.name_attempts)
                last = e
        raise last

    def _put_once(self, stream: BinaryIO, lifetime: dt.timedelta, extension: str) -> StoredObject:
        created_at = self.clock()
        try:
            expires_at = created_at + lifetime
        except OverflowError as e:
            raise ValueError(f"lifetime out of range: {lifetime}") from e
        record = StoredObject(
            name=self.names.generate(extension),
            created_at=created_at,
            expires_at=expires_at,
        )

        with self._session() as db:
            db.add(record)
            try:
                db.flush()
            except IntegrityError as e:
                db.rollback()
                raise DuplicateName(record.name) from e
            except SQLAlchemyError as e:
                db.rollback()
                raise CatalogError(f"insert failed: {e}") from e

            path = self.blob_path(record.name)
            try:
                out = path.open("xb")
            except FileExistsError as e:
                db.rollback()
                raise DuplicateName(record.name) from e
            except OSError as e:
                db.rollback()
                raise BlobWriteError(f"cannot create {path}: {e}") from e

            try:
                with out:
                    while True:
                        chunk = stream.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        out.write(chunk)
            except BaseException as e:
                # no partial blob survives a failed copy
                db.rollback()
                path.unlink(missing_ok=True)
                if isinstance(e, OSError):
                    raise BlobWriteError(f"cannot write {path}: {e}") from e
                raise

            try:
                db.commit()
            except SQLAlchemyError as e:
                # blob stays on disk as an orphan, nothing references it
                db.rollback()
                raise CommitError(f"commit failed for {record.name}: {e}") from e

        logger.info("Stored %s (id=%s) until %s", record.name, record.id, record.expires_at.isoformat())
        return record

    def get(self, name: str) -> StoredObject | None:
        """The live record called ``name``, or None when unknown or expired."""
        try:
            with self._session() as db:
                record = db.execute(
                    select(StoredObject).where(StoredObject.name == name)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise CatalogError(f"lookup failed for {name}: {e}") from e
        if record is None or record.is_expired(self.clock()):
            return None
        return record

    def open_blob(self, record: StoredObject) -> Path:
        path = self.blob_path(record.name)
        if not path.is_file():
            raise BlobReadError(f"blob missing on disk: {path}")
        return path

    def _expired(self, db, now: dt.datetime) -> list[StoredObject]:
        return list(
            db.execute(select(StoredObject).where(StoredObject.expires_at < now)).scalars().all()
        )

    def _remove_blob(self, record: StoredObject) -> None:
        path = self.blob_path(record.name)
        try:
            path.unlink()
        except FileNotFoundError:
            # never written or already gone
            return
        except OSError as e:
            raise BlobDeleteError(f"cannot delete {path}: {e}") from e

    def sweep(self) -> int:
        """Delete expired blobs and their rows. Returns the number removed."""
        now = self.clock()
        with self._session() as db:
            try:
                expired = self._expired(db, now)
            except SQLAlchemyError as e:
                raise CatalogError(f"expired query failed: {e}") from e

            removed: list[int] = []
            for record in expired:
                try:
                    self._remove_blob(record)
                except BlobDeleteError as e:
                    logger.warning("Keeping %s for next sweep: %s", record.name, e)
                    continue
                removed.append(record.id)

            if not removed:
                return 0

            try:
                db.execute(delete(StoredObject).where(StoredObject.id.in_(removed)))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise CatalogError(f"delete of {len(removed)} expired rows failed: {e}") from e

        logger.info("Sweep removed %d expired file(s)", len(removed))
        return len(removed)

    def start_sweeper(self, interval: float = 60.0) -> ExpirySweeper:
        if self._sweeper is None:
            self._sweeper = ExpirySweeper(self.sweep, interval=interval)
        self._sweeper.start()
        return self._sweeper

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop(wait=True)
            self._sweeper = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
