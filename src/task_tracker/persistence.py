"""File-backed persistence for the whole dataset.

The dataset is written as one JSON (or YAML, by file suffix) document and
replaced atomically on every save. There is no append log and no partial
write: each save is a complete snapshot.

Loading is best effort. A missing, unreadable or malformed file yields an
empty :class:`Dataset`; the problem is logged but never raised, so a bad
file can never keep the service from starting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from filelock import FileLock
from loguru import logger

from .constants import DATA_FILE, LOCK_SUFFIX
from .errors import MalformedPersistedData, PersistenceFailed
from .io_utils import _load_data_with_error, _save_data
from .models import Dataset


class DatasetFile:
    """Load and save a :class:`Dataset` to a single file.

    Parameters
    ----------
    path:
        Target document. ``.yaml``/``.yml`` selects YAML, anything else JSON.
    """

    def __init__(self, path: Path | str = DATA_FILE) -> None:
        self.path = Path(path)
        self._lock = FileLock(str(self.path) + LOCK_SUFFIX)
        self.last_load_error: Optional[str] = None

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Dataset:
        """Load the dataset, raising :class:`MalformedPersistedData` on bad content."""
        if not self.path.exists():
            return Dataset()
        try:
            with self._lock:
                raw, err = _load_data_with_error(self.path, {"users": {}})
        except OSError as exc:
            raise MalformedPersistedData(f"{self.path.name}: {exc.__class__.__name__}: {exc}") from exc
        if err:
            raise MalformedPersistedData(err)
        return Dataset.from_dict(raw)

    def load(self) -> Dataset:
        self.last_load_error = None
        try:
            dataset = self.read()
        except MalformedPersistedData as exc:
            self.last_load_error = str(exc)
            logger.warning("Discarding unreadable data file {}: {}", self.path, exc)
            return Dataset()
        logger.info(
            "Loaded {} users / {} tasks from {}",
            len(dataset.users),
            dataset.task_count(),
            self.path,
        )
        return dataset

    def save(self, dataset: Dataset) -> None:
        try:
            payload = dataset.to_dict()
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock:
                _save_data(self.path, payload)
        except (OSError, TypeError, ValueError, yaml.YAMLError) as exc:
            raise PersistenceFailed(f"Failed to write {self.path}: {exc}", cause=exc) from exc
