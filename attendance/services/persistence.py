"""Load and save the named state blob."""
from typing import Optional

import pydantic
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from attendance.core.constants import STATE_SCHEMA_VERSION
from attendance.core.exceptions import IncompatibleStateError, PersistenceError
from attendance.core.logging_config import get_logger
from attendance.db.models import StateBlob
from attendance.models import StateSnapshot
from attendance.services.store import AttendanceStore

logger = get_logger(__name__)


class StateRepository:
    """
    Reads and writes one StateBlob row keyed by ``storage_key``.

    Failures are raised as PersistenceError and never swallowed: a lost
    write would silently drop attendance records.
    """

    def __init__(self, db: Session, storage_key: str):
        self.db = db
        self.storage_key = storage_key

    def load(self) -> Optional[StateSnapshot]:
        """
        Return the stored snapshot, or None if nothing was saved yet.

        Raises:
            IncompatibleStateError: Blob written by an unknown schema version
            PersistenceError: Database error or unreadable payload
        """
        try:
            blob = self.db.get(StateBlob, self.storage_key)
        except SQLAlchemyError as e:
            logger.error("state_load_failed", storage_key=self.storage_key, error=str(e))
            raise PersistenceError("Failed to load attendance state") from e

        if blob is None:
            return None

        if blob.schema_version != STATE_SCHEMA_VERSION:
            logger.error(
                "state_schema_mismatch",
                storage_key=self.storage_key,
                found=blob.schema_version,
                expected=STATE_SCHEMA_VERSION,
            )
            raise IncompatibleStateError(
                f"Stored state has schema version {blob.schema_version}, "
                f"expected {STATE_SCHEMA_VERSION}"
            )

        try:
            snapshot = StateSnapshot.model_validate_json(blob.payload)
        except pydantic.ValidationError as e:
            logger.error("state_payload_invalid", storage_key=self.storage_key, error=str(e))
            raise PersistenceError("Stored attendance state is unreadable") from e

        if snapshot.schema_version != blob.schema_version:
            raise IncompatibleStateError("Stored state payload and row disagree on schema version")

        return snapshot

    def save(self, snapshot: StateSnapshot) -> None:
        """Write the snapshot, replacing any previous one under the same key."""
        payload = snapshot.model_dump_json()
        try:
            blob = self.db.get(StateBlob, self.storage_key)
            if blob is None:
                blob = StateBlob(storage_key=self.storage_key)
                self.db.add(blob)
            blob.schema_version = snapshot.schema_version
            blob.payload = payload
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("state_save_failed", storage_key=self.storage_key, error=str(e))
            raise PersistenceError("Failed to save attendance state") from e

        logger.debug(
            "state_saved",
            storage_key=self.storage_key,
            sessions=len(snapshot.sessions),
            claims=len(snapshot.claims),
        )


def load_store(db: Session, store: AttendanceStore, storage_key: str) -> AttendanceStore:
    """Populate ``store`` from the blob, leaving it empty on first start."""
    snapshot = StateRepository(db, storage_key).load()
    if snapshot is not None:
        store.restore(snapshot)
    logger.info(
        "state_loaded",
        storage_key=storage_key,
        sessions=len(store.registry),
        claims=len(store.ledger),
    )
    return store


def save_store(db: Session, store: AttendanceStore, storage_key: str) -> None:
    StateRepository(db, storage_key).save(store.snapshot())
