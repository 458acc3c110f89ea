"""Per-site documents holding synced Jira configuration.

Each Jira site gets one JSON file in the ``documents`` subdirectory of the
data directory, away from the connection registry, named after the site
URL without its scheme. A document maps category keys (``proyectos``,
``workflows``, ``estados``, or anything an older/newer version wrote) to the
stored value. New data is merged in shallowly: a key written by a sync
replaces the stored key of the same name and every other key is left alone.
"""

import asyncio
import json
import logging
import re
from pathlib import Path

from jiradash.models.sync import SyncDocument
from jiradash.storage.base import DATA_DIR, StorageError, write_json_atomic

logger = logging.getLogger(__name__)

# Configuration
DOCUMENTS_DIR = DATA_DIR / "documents"

_SCHEME_PREFIXES = ("http://", "https://")


def document_filename(domain: str) -> str:
    """Derive the document file name for a site URL.

    ``https://acme.atlassian.net`` becomes ``acme.atlassian.net.json``. Path
    separators become underscores and anything else outside
    ``[A-Za-z0-9._-]`` is replaced too, so the name never leaves the documents
    directory.
    """
    name = domain.strip()
    for prefix in _SCHEME_PREFIXES:
        if name.lower().startswith(prefix):
            name = name[len(prefix) :]
            break
    name = name.rstrip("/").replace("/", "_")
    name = re.sub(r"[^a-zA-Z0-9._-]", "_", name)

    # Ensure it doesn't start with a dot (hidden file, "..")
    if name.startswith("."):
        name = "_" + name[1:]
    if not name:
        name = "_"
    return f"{name}.json"


def merge_documents(old: SyncDocument, new: SyncDocument) -> SyncDocument:
    """Write every key of ``new`` over ``old``. Neither input is modified."""
    merged = dict(old)
    merged.update(new)
    return merged


class SyncDocumentStore:
    """Reads and writes the per-site documents."""

    def __init__(self, base_dir: Path | None = None):
        """Initialize the document store.

        Args:
            base_dir: Override the default documents directory.
        """
        self.base_dir = base_dir or DOCUMENTS_DIR
        self._locks: dict[str, asyncio.Lock] = {}

    def path_for(self, domain: str) -> Path:
        return self.base_dir / document_filename(domain)

    def _lock_for(self, domain: str) -> asyncio.Lock:
        key = document_filename(domain)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def _read(self, path: Path) -> SyncDocument:
        """Load a document, treating a missing or unparsable file as empty.

        Raises:
            StorageError: If the file exists but cannot be read
        """
        if not path.exists():
            logger.info(f"No document at {path}, starting a new one")
            return {}
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}", path) from e
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Unparsable document {path}, it will be overwritten: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(
                f"Document {path} holds a {type(data).__name__}, not an object; "
                "it will be overwritten"
            )
            return {}
        return data

    async def load(self, domain: str) -> SyncDocument:
        """Return the stored document for a site (empty if never synced)."""
        async with self._lock_for(domain):
            return self._read(self.path_for(domain))

    async def update(self, domain: str, fresh: SyncDocument) -> SyncDocument:
        """Merge fresh data into a site's document and persist the result.

        Load, merge and save happen under the site's lock.

        Raises:
            StorageError: If the document cannot be read or written
        """
        path = self.path_for(domain)
        async with self._lock_for(domain):
            merged = merge_documents(self._read(path), fresh)
            write_json_atomic(path, merged)
        logger.info(f"Saved document for {domain} to {path} (keys: {', '.join(sorted(merged))})")
        return merged


# Global instance for dependency injection
_document_store: SyncDocumentStore | None = None


def get_document_store() -> SyncDocumentStore:
    """Get the global document store instance."""
    global _document_store
    if _document_store is None:
        _document_store = SyncDocumentStore()
    return _document_store
