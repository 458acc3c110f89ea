"""Shared helpers and errors for the JSON file stores."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

# Configuration
DATA_DIR = Path(os.getenv("DATA_PATH", "./data"))


class StorageError(Exception):
    """A persisted document could not be read, parsed or written."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class NoActiveConnectionError(Exception):
    """No saved connection is selected for use."""

    pass


class ConnectionIndexError(IndexError):
    """A registry index is out of range."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Index {index} is out of range for {size} connection(s)")
        self.index = index
        self.size = size


def write_json_atomic(path: Path, data: Any) -> None:
    """Write ``data`` as indented JSON, replacing the file in one step.

    Raises:
        StorageError: If the data cannot be serialized or the file written
    """
    try:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Cannot serialize document for {path}: {e}", path) from e

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise StorageError(f"Cannot write {path}: {e}", path) from e
