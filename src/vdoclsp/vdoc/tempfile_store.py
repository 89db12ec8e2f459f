"""
File-backed virtual documents.

Two kinds of files are written:

* transient files, created next to the parent document with a unique name for a single request
  and deleted afterwards;
* persistent files, one per (parent document, language) pair, overwritten on every request and
  never deleted by this store.
"""

import hashlib
import os
import tempfile
import threading
from dataclasses import dataclass

from sensai.util import logging

from vdoclsp.constants import VDOC_FILE_PREFIX
from vdoclsp.languages import EmbeddedLanguage
from vdoclsp.ls_exceptions import VDocResourceError
from vdoclsp.util.async_io import run_in_executor
from vdoclsp.util.paths import uri_to_path
from vdoclsp.vdoc.vdoc import VirtualDoc

log = logging.getLogger(__name__)


@dataclass
class VDocFileRecord:
    """State of the persistent file of one (parent document, language) pair."""

    parent_uri: str
    language_id: str
    path: str
    content_digest: str = ""
    """Digest of the content of the write that most recently replaced the file."""
    writes: int = 0


def _content_digest(content: str) -> str:
    return hashlib.sha1(content.encode("utf-8")).hexdigest()


class TempFileStore:
    """
    Keyed store of file-backed virtual documents.

    Persistent files are keyed by ``(parent_uri, language id)``. Concurrent materializations of the same
    key are not serialized: each one writes a private temporary file which then atomically replaces the
    persistent file, so the file always holds one complete write and the last replacement wins. A path
    handed out earlier may already hold the content of a later request.
    """

    def __init__(self, vdoc_dir: str, encoding: str = "utf-8"):
        """
        :param vdoc_dir: directory for persistent files and for transient files of documents without a directory
        :param encoding: encoding of the written files
        """
        self.vdoc_dir = vdoc_dir
        self.encoding = encoding
        self._records: dict[tuple[str, str], VDocFileRecord] = {}
        # guards replacing a persistent file together with updating its record
        self._replace_lock = threading.Lock()

    def persistent_path(self, parent_uri: str, language: EmbeddedLanguage) -> str:
        key_digest = hashlib.sha1(f"{parent_uri}\0{language.id}".encode()).hexdigest()[:16]
        return os.path.join(self.vdoc_dir, f"{VDOC_FILE_PREFIX}{key_digest}.{language.extension}")

    def record(self, parent_uri: str, language: EmbeddedLanguage) -> VDocFileRecord | None:
        return self._records.get((parent_uri, language.id))

    def records(self) -> list[VDocFileRecord]:
        """
        :return: the records of all persistent files, for the session owning them
        """
        return list(self._records.values())

    def _write_persistent(self, parent_uri: str, language_id: str, path: str, content: str) -> VDocFileRecord:
        directory = os.path.dirname(path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=VDOC_FILE_PREFIX, suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
            with self._replace_lock:
                os.replace(tmp_path, path)
                key = (parent_uri, language_id)
                record = self._records.get(key)
                if record is None:
                    record = VDocFileRecord(parent_uri=parent_uri, language_id=language_id, path=path)
                    self._records[key] = record
                record.content_digest = _content_digest(content)
                record.writes += 1
                return record
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    async def materialize(self, virtual_doc: VirtualDoc, parent_uri: str) -> VDocFileRecord:
        """
        Writes the virtual document to the persistent file of its (parent document, language) pair.

        :return: the record of the persistent file, updated by this write
        """
        language = virtual_doc.language
        path = self.persistent_path(parent_uri, language)
        try:
            record = await run_in_executor(self._write_persistent, parent_uri, language.id, path, virtual_doc.content)
        except OSError as e:
            raise VDocResourceError(f"Could not write virtual document {path}", cause=e) from e
        log.debug(f"Wrote persistent virtual document {path} (write {record.writes})")
        return record

    def _transient_dir(self, parent_uri: str) -> str:
        try:
            parent_dir = os.path.dirname(uri_to_path(parent_uri))
        except ValueError:
            return self.vdoc_dir
        if parent_dir and os.path.isdir(parent_dir):
            return parent_dir
        return self.vdoc_dir

    def _create_transient(self, directory: str, extension: str, content: str) -> str:
        os.makedirs(directory, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix=VDOC_FILE_PREFIX, suffix=f".{extension}", dir=directory)
        with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
            f.write(content)
        return path

    async def create_transient(self, virtual_doc: VirtualDoc, parent_uri: str) -> str:
        """
        Writes the virtual document to a new uniquely named file in the parent document's directory,
        so that the language's tool picks up project-specific configuration.

        :return: the path of the new file, which the caller must delete
        """
        directory = self._transient_dir(parent_uri)
        try:
            path = await run_in_executor(self._create_transient, directory, virtual_doc.language.extension, virtual_doc.content)
        except OSError as e:
            raise VDocResourceError(f"Could not create virtual document in {directory}", cause=e) from e
        log.debug(f"Created transient virtual document {path}")
        return path

    async def delete(self, path: str) -> None:
        await run_in_executor(os.remove, path)
        log.debug(f"Deleted transient virtual document {path}")
