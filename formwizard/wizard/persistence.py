"""
Draft Persistence

Debounced autosave of in-progress form data to an external key-value
store, hydration of a saved draft, and deletion after a successful
submission. File-kind fields are never persisted.
"""

import json
import logging
import os
import re
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union

from ..config.models import FILE_KINDS, FieldKind
from .errors import PersistenceError
from .fields import FormData
from .scheduler import ScheduledTask, Scheduler
from .steps import Flow

logger = logging.getLogger(__name__)


DEFAULT_AUTOSAVE_DELAY = 0.8


class KeyValueStore(Protocol):
    """External draft store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store. Records every write for inspection."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})
        self.writes: List[Tuple[str, str]] = []

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes.append((key, value))

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FileStore:
    """
    Stores each key as a JSON file in a directory.

    The directory defaults to ~/.formwizard/drafts and can be moved
    with the FORMWIZARD_DRAFT_DIR environment variable.
    """

    DEFAULT_DIR = Path.home() / ".formwizard" / "drafts"

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """
        Initialize the store.

        Args:
            directory: Directory for draft files
        """
        self.directory = Path(directory).expanduser() if directory else self._get_dir()

    @classmethod
    def _get_dir(cls) -> Path:
        """Get draft directory from environment or default."""
        env_dir = os.environ.get("FORMWIZARD_DRAFT_DIR")
        if env_dir:
            return Path(env_dir).expanduser()
        return cls.DEFAULT_DIR

    def path_for(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Cannot read draft {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise PersistenceError(f"Cannot write draft {path}: {e}") from e

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot delete draft {path}: {e}") from e


class SaveStatus(str, Enum):
    """Autosave status shown by hosts."""
    SAVING = "Saving..."
    SAVED = "Saved"


# ============================================================
# Encoding
# ============================================================

def encode_draft(flow: Flow, form_data: Mapping[str, Any]) -> str:
    """
    Encode form data as a JSON draft.

    Strings and booleans are kept as is, multiselect sets become
    sorted lists, file fields are left out.
    """
    payload: Dict[str, Any] = {}
    for spec in flow.fields:
        if spec.kind in FILE_KINDS or spec.name not in form_data:
            continue
        value = form_data[spec.name]
        if spec.kind == FieldKind.MULTISELECT:
            value = sorted(value)
        payload[spec.name] = value
    return json.dumps(payload, sort_keys=True)


def _decode_value(kind: FieldKind, value: Any) -> Tuple[bool, Any]:
    if kind in (FieldKind.TEXT, FieldKind.SELECT):
        return isinstance(value, str), value
    if kind == FieldKind.BOOLEAN:
        return isinstance(value, bool), value
    if kind == FieldKind.MULTISELECT:
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return True, frozenset(value)
    return False, None


def decode_draft(flow: Flow, raw: str) -> FormData:
    """
    Decode a JSON draft into form values for `flow`.

    Keys the flow no longer declares, file fields, and values whose
    type does not match the field kind are dropped.

    Raises:
        PersistenceError: If the draft is not a JSON object
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise PersistenceError(f"Corrupt draft for {flow.name}: {e}") from e
    if not isinstance(data, dict):
        raise PersistenceError(f"Corrupt draft for {flow.name}: expected an object")

    values: FormData = {}
    for name, value in data.items():
        if not flow.has_field(name):
            logger.debug("Dropping stale draft key %s", name)
            continue
        spec = flow.field(name)
        if spec.kind in FILE_KINDS:
            continue
        ok, decoded = _decode_value(spec.kind, value)
        if not ok:
            logger.debug("Dropping draft value of %s: does not fit %s", name, spec.kind.value)
            continue
        values[name] = decoded
    return values


# ============================================================
# Debounced Autosave
# ============================================================

class DraftPersistence:
    """
    Debounced draft autosave for one flow.

    Each call to `schedule()` cancels the pending save and starts a
    fresh quiet period; the write happens only once no edit has
    arrived for the whole period. The payload is encoded when the
    save is scheduled, so the last scheduled write wins.
    """

    def __init__(
        self,
        flow: Flow,
        store: KeyValueStore,
        scheduler: Scheduler,
        delay: float = DEFAULT_AUTOSAVE_DELAY,
        key: Optional[str] = None,
    ):
        """
        Initialize draft persistence.

        Args:
            flow: The flow whose data is saved
            store: Key-value store holding the draft
            scheduler: Scheduler for the debounced write
            delay: Quiet period in seconds
            key: Store key (defaults to the flow's storage key)
        """
        self.flow = flow
        self.store = store
        self.scheduler = scheduler
        self.delay = delay
        self.key = key or flow.storage_key
        self.status = SaveStatus.SAVED

        self._lock = threading.Lock()
        # Serializes store writes and deletes
        self._io_lock = threading.Lock()
        self._task: Optional[ScheduledTask] = None
        self._payload: Optional[str] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """Whether a save is scheduled but not yet written."""
        return self._payload is not None

    def load(self) -> FormData:
        """
        Read the saved draft.

        Returns:
            Decoded field values, or an empty dict when there is no
            draft or it cannot be read
        """
        try:
            raw = self.store.get(self.key)
            if raw is None:
                return {}
            values = decode_draft(self.flow, raw)
        except (PersistenceError, OSError) as e:
            logger.warning("Ignoring unreadable draft %s: %s", self.key, e)
            return {}

        logger.info("Loaded draft %s (%d fields)", self.key, len(values))
        return values

    def has_draft(self) -> bool:
        try:
            return self.store.get(self.key) is not None
        except (PersistenceError, OSError) as e:
            logger.warning("Cannot check draft %s: %s", self.key, e)
            return False

    def schedule(self, form_data: Mapping[str, Any]) -> None:
        """Schedule a debounced save of `form_data`, superseding any pending one."""
        payload = encode_draft(self.flow, form_data)
        with self._lock:
            if self._task is not None:
                self._task.cancel()
            self._generation += 1
            self._payload = payload
            self.status = SaveStatus.SAVING
            self._task = self.scheduler.call_later(self.delay, self._fire, self._generation)

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._payload is None:
                return
            payload = self._payload
            self._payload = None
            self._task = None
        self._write(payload, generation)

    def _write(self, payload: str, generation: int) -> bool:
        with self._io_lock:
            with self._lock:
                # Superseded, cancelled or discarded since it was scheduled
                if generation != self._generation:
                    return False
            try:
                self.store.set(self.key, payload)
            except (PersistenceError, OSError) as e:
                logger.warning("Draft save failed for %s: %s", self.key, e)
                return False

        with self._lock:
            if generation == self._generation:
                self.status = SaveStatus.SAVED
        logger.debug("Saved draft %s", self.key)
        return True

    def flush(self) -> bool:
        """
        Write a pending save immediately.

        Returns:
            True if a pending save was written
        """
        with self._lock:
            if self._payload is None:
                return False
            if self._task is not None:
                self._task.cancel()
            payload = self._payload
            generation = self._generation
            self._payload = None
            self._task = None
        return self._write(payload, generation)

    def cancel(self) -> None:
        """Drop a pending save without writing it."""
        with self._lock:
            if self._task is not None:
                self._task.cancel()
            self._generation += 1
            self._task = None
            self._payload = None
            self.status = SaveStatus.SAVED

    def discard(self) -> None:
        """Cancel any pending save and delete the stored draft."""
        self.cancel()
        with self._io_lock:
            try:
                self.store.delete(self.key)
            except (PersistenceError, OSError) as e:
                logger.warning("Draft delete failed for %s: %s", self.key, e)
                return
        logger.info("Deleted draft %s", self.key)
