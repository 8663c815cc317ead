"""JSON-indexed, content-addressed store of saved briefings.

Each briefing owns exactly one blob whose key is derived from its id. The
index lists briefings most recent first and is rewritten in full after every
change. Blobs are written before the index so an index entry never points at
audio that was not stored.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Union
from uuid import UUID, uuid4

from pydantic import ValidationError

from briefcast.application.interfaces import DurableStorage
from briefcast.errors import MissingBlobError, StorageError
from briefcast.telemetry import record_library_operation

from .models import DEFAULT_EXTENSION, Briefing, blob_key_for

logger = logging.getLogger(__name__)

DEFAULT_INDEX_KEY = "briefings.json"


class BlobRemoval(str, Enum):
    REMOVED = "removed"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete, separating index cleanup from blob cleanup."""

    briefing_id: UUID
    index_removed: bool
    blob: BlobRemoval
    index_persisted: bool = True
    error: str | None = None

    @property
    def clean(self) -> bool:
        """True when neither blob residue nor a stale durable index remains."""

        return self.blob is not BlobRemoval.FAILED and self.index_persisted


class BriefingLibrary:
    """Ordered library of briefings backed by a :class:`DurableStorage`.

    ``add`` and ``delete`` hold one lock for their whole duration; the index is
    a single-writer resource.
    """

    def __init__(
        self,
        storage: DurableStorage,
        *,
        index_key: str = DEFAULT_INDEX_KEY,
        extension: str = DEFAULT_EXTENSION,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._storage = storage
        self._index_key = index_key
        self._extension = extension
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._id_factory = id_factory
        self._entries: list[Briefing] = []
        self._lock = threading.RLock()
        self.index_dirty = False

    @property
    def briefings(self) -> tuple[Briefing, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, briefing_id: UUID) -> Briefing | None:
        for entry in self._entries:
            if entry.id == briefing_id:
                return entry
        return None

    def load_index(self) -> tuple[Briefing, ...]:
        """Read the durable index, degrading to an empty library on any failure."""

        with self._lock:
            try:
                raw = self._storage.read_all(self._index_key)
            except StorageError as exc:
                logger.warning("Briefing index unreadable, starting empty: %s", exc)
                raw = None
                record_library_operation("load", "degraded")
            self._entries = self._decode_index(raw) if raw is not None else []
            self.index_dirty = False
            logger.info("Loaded %s briefing(s) from %s", len(self._entries), self._index_key)
            return self.briefings

    def _decode_index(self, raw: bytes) -> list[Briefing]:
        try:
            document = json.loads(raw)
        except ValueError as exc:
            logger.warning("Briefing index is corrupt, starting empty: %s", exc)
            record_library_operation("load", "degraded")
            return []
        if not isinstance(document, list):
            logger.warning("Briefing index is not a list, starting empty")
            record_library_operation("load", "degraded")
            return []

        entries: list[Briefing] = []
        seen: set[UUID] = set()
        for position, item in enumerate(document):
            if not isinstance(item, dict):
                logger.warning("Skipping non-object index entry at position %s", position)
                continue
            try:
                briefing = Briefing.model_validate(item)
            except ValidationError as exc:
                logger.warning("Skipping unreadable index entry at position %s: %s", position, exc)
                continue
            if briefing.id in seen:
                logger.warning("Skipping duplicate index entry %s", briefing.id)
                continue
            seen.add(briefing.id)
            entries.append(briefing)
        record_library_operation("load", "ok")
        return entries

    def persist_index(self) -> bool:
        """Write the in-memory index; on failure keep memory as is and report False."""

        with self._lock:
            payload = json.dumps(
                [entry.to_record() for entry in self._entries],
                ensure_ascii=False,
                indent=2,
            ).encode("utf-8")
            try:
                self._storage.write_all(self._index_key, payload)
            except StorageError as exc:
                self.index_dirty = True
                logger.error("Failed to persist briefing index: %s", exc)
                record_library_operation("persist", "failed")
                return False
            self.index_dirty = False
            return True

    def add(self, topic: str, audio_bytes: bytes) -> Briefing:
        """Store ``audio_bytes`` and insert a new briefing at the front.

        Raises :class:`StorageError` if the blob cannot be written; the index
        is then left untouched.
        """

        cleaned_topic = topic.strip() if isinstance(topic, str) else ""
        if not cleaned_topic:
            raise ValueError("Briefing topic must not be empty")
        if not audio_bytes:
            raise ValueError("Briefing audio must not be empty")

        with self._lock:
            briefing_id = self._id_factory()
            briefing = Briefing(
                id=briefing_id,
                topic=cleaned_topic,
                created_at=self._clock(),
                audio_ref=blob_key_for(briefing_id, self._extension),
            )
            try:
                self._storage.write_all(briefing.audio_ref, bytes(audio_bytes))
            except StorageError:
                record_library_operation("add", "failed")
                logger.exception("Failed to store audio for briefing %s", briefing_id)
                raise

            self._entries.insert(0, briefing)
            self.persist_index()
            record_library_operation("add", "ok")
            logger.info("Saved briefing %s (%s bytes) topic=%r", briefing_id, len(audio_bytes), cleaned_topic)
            return briefing

    def delete(self, target: Union[Briefing, UUID]) -> DeleteResult:
        """Remove a briefing's blob and index entry as one logical operation."""

        with self._lock:
            briefing_id = target.id if isinstance(target, Briefing) else target
            entry = self.get(briefing_id)
            if entry is None and isinstance(target, Briefing):
                entry = target
            if entry is None:
                record_library_operation("delete", "noop")
                return DeleteResult(briefing_id=briefing_id, index_removed=False, blob=BlobRemoval.ABSENT)

            error: str | None = None
            try:
                blob = BlobRemoval.REMOVED if self._storage.remove(entry.audio_ref) else BlobRemoval.ABSENT
            except StorageError as exc:
                blob = BlobRemoval.FAILED
                error = str(exc)
                logger.error("Failed to remove audio blob %s: %s", entry.audio_ref, exc)

            before = len(self._entries)
            self._entries = [item for item in self._entries if item.id != briefing_id]
            index_removed = len(self._entries) != before
            persisted = self.persist_index() if index_removed else True

            result = DeleteResult(
                briefing_id=briefing_id,
                index_removed=index_removed,
                blob=blob,
                index_persisted=persisted,
                error=error,
            )
            record_library_operation("delete", "clean" if result.clean else "residue")
            return result

    def read_audio(self, target: Union[Briefing, UUID]) -> bytes:
        """Return the stored audio of an indexed briefing."""

        briefing = target if isinstance(target, Briefing) else self.get(target)
        if briefing is None:
            raise KeyError(target)
        data = self._storage.read_all(briefing.audio_ref)
        if data is None:
            raise MissingBlobError(
                f"Briefing {briefing.id} has no stored audio under {briefing.audio_ref}"
            )
        return data


__all__ = ["BlobRemoval", "BriefingLibrary", "DEFAULT_INDEX_KEY", "DeleteResult"]
