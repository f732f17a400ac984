"""Durable JSON key-value store for captured requests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.constants import RECORDER_STORAGE_KEY
from core.errors import RecorderError


class JsonRequestStore:
    """JSON file holding captured request payloads under one fixed key."""

    def __init__(self, store_path: Path, key: str = RECORDER_STORAGE_KEY) -> None:
        self._store_path = store_path
        self._key = key

    @property
    def path(self) -> Path:
        """Backing file path."""
        return self._store_path

    def initialize(self) -> None:
        """Create the key with an empty list when absent."""
        payload = self._read_file()
        if self._key not in payload:
            payload[self._key] = []
            self._write_file(payload)

    def load(self) -> list[Any]:
        """Return stored entries, empty when nothing was captured.

        Raises:
            RecorderError: If the store content is malformed.
        """
        entries = self._read_file().get(self._key, [])
        if not isinstance(entries, list):
            raise RecorderError(
                f"Request store {self._store_path} key '{self._key}' must hold a list. "
                "Clear the store and capture again."
            )
        return entries

    def save(self, entries: list[Any]) -> None:
        """Replace stored entries, keeping unrelated keys."""
        payload = self._read_file()
        payload[self._key] = entries
        self._write_file(payload)

    def _read_file(self) -> dict[str, Any]:
        if not self._store_path.exists():
            return {}
        try:
            payload = json.loads(self._store_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise RecorderError(
                f"Failed to read request store at {self._store_path}: {error}. "
                "Fix or delete the file and retry."
            ) from error
        if not isinstance(payload, dict):
            raise RecorderError(
                f"Request store at {self._store_path} must contain a JSON object."
            )
        return payload

    def _write_file(self, payload: dict[str, Any]) -> None:
        try:
            self._store_path.parent.mkdir(parents=True, exist_ok=True)
            self._store_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as error:
            raise RecorderError(
                f"Failed to write request store at {self._store_path}: {error}."
            ) from error
