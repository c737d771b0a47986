"""
State Store - key-value persistence for the engine state blob.

The engine only needs load(key) / save(key, blob). JsonStateStore keeps
every key in one JSON file and writes it atomically (temp file + rename),
MemoryStateStore keeps them in a dict.
"""

import os
import json
import logging

import sys
sys.path.insert(0, '.')
from app.errors import PersistenceLoadError, PersistenceSaveError

logger = logging.getLogger(__name__)


class MemoryStateStore:
    """In-process store. Blobs are held as JSON text so callers never share objects."""

    def __init__(self):
        self._data = {}

    def load(self, key):
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise PersistenceLoadError(f'Corrupt state for {key!r}: {e}') from e

    def save(self, key, blob):
        try:
            self._data[key] = json.dumps(blob)
        except (TypeError, ValueError) as e:
            raise PersistenceSaveError(f'Unserializable state for {key!r}: {e}') from e


class JsonStateStore:
    def __init__(self, path):
        self.path = path

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceLoadError(f'Cannot read {self.path}: {e}') from e
        if not isinstance(data, dict):
            raise PersistenceLoadError(f'Unexpected content in {self.path}')
        return data

    def load(self, key):
        """Return the blob stored under `key`, or None if there is none."""
        return self._read_all().get(key)

    def save(self, key, blob):
        try:
            data = self._read_all()
        except PersistenceLoadError:
            logger.warning("[State] Overwriting unreadable state file %s", self.path)
            data = {}
        data[key] = blob

        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = self.path + '.tmp'
            with open(tmp_path, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceSaveError(f'Cannot write {self.path}: {e}') from e
