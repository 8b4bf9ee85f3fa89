"""
mbstub File Store

Owns the stubs directory and an in-memory index of saved templates.

The index is process-lifetime state: it starts empty and is never
reconciled with files that already exist on disk.
"""

import logging
import threading
from contextlib import nullcontext
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Dict, Optional, Union

from ..errors import InvalidFilename, StubNotFound
from ..stub.models import StoredFile
from ..common.utils import ensure_extension


class FileStore:
    """
    Persists named template files and tracks their metadata.

    Append is plain text concatenation: appending to a file yields a file
    with two template directives, not one merged stubs array.

    Example:
        store = FileStore('stubs')
        store.save('users.ejs', template)
        store.append('users.ejs', other_template)
        store.read('users.ejs')

        for record in store.list_records():  # newest first
            print(record.filename, record.created_at)
    """

    def __init__(
        self,
        directory: Union[str, Path],
        extension: str = '.ejs',
        lock_writes: bool = True
    ):
        """
        Initialize file store.

        Args:
            directory: Directory holding template files (created on demand)
            extension: Extension recognized by list_files()
            lock_writes: Serialize save/append per filename
        """
        self.directory = Path(directory)
        self.extension = extension
        self.lock_writes = lock_writes

        self.records: Dict[str, StoredFile] = {}
        self._next_id = 1
        self._sequence: Dict[str, int] = {}  # write order, breaks timestamp ties
        self._write_count = 0

        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._index_lock = threading.Lock()  # guards records, ids and write order

        self.logger = logging.getLogger("mbstub.storage")

        self.ensure_dir()

    def ensure_dir(self):
        """Create the stubs directory if it doesn't exist."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def ensure_extension(self, filename: str) -> str:
        """Append the store's extension when missing."""
        return ensure_extension(filename, self.extension)

    def path_for(self, filename: str) -> Path:
        """
        Resolve a filename inside the stubs directory.

        Raises:
            InvalidFilename: If the name is empty or contains path components
        """
        if not filename or filename in ('.', '..'):
            raise InvalidFilename(f"Invalid filename: {filename!r}")
        if '/' in filename or '\\' in filename or '\x00' in filename:
            raise InvalidFilename(f"Invalid filename: {filename!r}")
        return self.directory / filename

    def exists(self, filename: str) -> bool:
        """Check whether a template file exists."""
        return self.path_for(filename).is_file()

    def save(self, filename: str, content: str) -> str:
        """
        Create or overwrite a template file.

        Args:
            filename: Target filename
            content: Full file content

        Returns:
            The filename written
        """
        path = self.path_for(filename)
        with self._write_lock(filename):
            self._write(path, content)
            self._record(filename, content)

        self.logger.info(f"Saved {filename} ({len(content)} chars)")
        return filename

    def append(self, filename: str, content: str) -> str:
        """
        Append content to a template file, separated by a newline.

        Behaves exactly like save() when the file does not exist yet.

        Args:
            filename: Target filename
            content: Content to append

        Returns:
            The filename written
        """
        path = self.path_for(filename)
        with self._write_lock(filename):
            if path.is_file():
                existing = path.read_text(encoding='utf-8')
                new_content = existing + '\n' + content
                self._write(path, new_content)
                self._record(filename, new_content)
                self.logger.info(f"Appended to {filename} ({len(content)} chars)")
                return filename

            self._write(path, content)
            self._record(filename, content)

        self.logger.info(f"Saved {filename} ({len(content)} chars)")
        return filename

    def list_files(self) -> List[str]:
        """
        List template files in the stubs directory.

        Returns:
            Filenames ending in the store's extension, in directory order
        """
        self.ensure_dir()
        return [
            entry.name for entry in self.directory.iterdir()
            if entry.is_file() and entry.name.endswith(self.extension)
        ]

    def list_records(self) -> List[StoredFile]:
        """Return metadata records, newest first."""
        with self._index_lock:
            return sorted(
                self.records.values(),
                key=lambda r: (r.created_at, self._sequence.get(r.filename, 0)),
                reverse=True
            )

    def get_record(self, filename: str) -> Optional[StoredFile]:
        """Get the metadata record for a filename, if one was written."""
        return self.records.get(filename)

    def read(self, filename: str) -> str:
        """
        Read a template file.

        Raises:
            StubNotFound: If the file does not exist
        """
        path = self.path_for(filename)
        try:
            return path.read_text(encoding='utf-8')
        except (FileNotFoundError, IsADirectoryError) as e:
            raise StubNotFound(filename) from e

    def _write(self, path: Path, content: str):
        """Write file content, creating the directory first."""
        self.ensure_dir()
        path.write_text(content, encoding='utf-8')

    def _record(self, filename: str, content: str):
        """Create or replace the metadata record for a filename."""
        now = datetime.now(timezone.utc)
        with self._index_lock:
            existing = self.records.get(filename)

            if existing:
                existing.content = content
                existing.created_at = now
            else:
                self.records[filename] = StoredFile(
                    id=self._next_id,
                    filename=filename,
                    content=content,
                    created_at=now
                )
                self._next_id += 1

            self._write_count += 1
            self._sequence[filename] = self._write_count

    def _write_lock(self, filename: str):
        """Get the per-filename lock (a no-op lock when locking is disabled)."""
        if not self.lock_writes:
            return nullcontext()

        with self._locks_guard:
            lock = self._locks.get(filename)
            if lock is None:
                lock = threading.Lock()
                self._locks[filename] = lock
        return lock

