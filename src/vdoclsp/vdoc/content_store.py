"""
In-memory virtual documents served under content-addressed uris.
"""

import hashlib
from pathlib import PurePosixPath
from urllib.parse import quote, urlparse

from sensai.util import logging

from vdoclsp.constants import EMBEDDED_CONTENT_SCHEME
from vdoclsp.util.lru_cache import LRUCache
from vdoclsp.vdoc.vdoc import VirtualDoc

log = logging.getLogger(__name__)


def embedded_content_uri(virtual_doc: VirtualDoc, parent_uri: str) -> str:
    """
    Computes the uri of an in-memory virtual document. The uri depends only on the parent document,
    the language and the content, so identical requests yield identical uris.

    The path ends with the parent's file name and the language's extension, so that tools selecting
    behaviour by file extension treat the document correctly.
    """
    language = virtual_doc.language
    digest = hashlib.sha256("\0".join((parent_uri, language.id, virtual_doc.content)).encode("utf-8")).hexdigest()[:16]
    parent_name = PurePosixPath(urlparse(parent_uri).path).name or "document"
    return f"{EMBEDDED_CONTENT_SCHEME}://{language.id}/{digest}/{quote(parent_name)}.{language.extension}"


class EmbeddedContentStore:
    """
    Keyed store of in-memory virtual documents, from which a content provider answers requests of a
    language's tool for an embedded-content uri. Least recently used documents are evicted.
    """

    def __init__(self, max_entries: int = 256, max_memory_mb: int = 64):
        self._contents: LRUCache[str, str] = LRUCache(
            max_entries=max_entries,
            max_size=max_memory_mb * 1024 * 1024,
            sizeof=len,
        )

    def add(self, virtual_doc: VirtualDoc, parent_uri: str) -> str:
        """
        :return: the uri under which the content can now be retrieved
        """
        uri = embedded_content_uri(virtual_doc, parent_uri)
        self._contents.put(uri, virtual_doc.content)
        return uri

    def provide_content(self, uri: str) -> str | None:
        """
        :return: the content of the virtual document with the given uri, or None if it is unknown or was evicted
        """
        content = self._contents.get(uri)
        if content is None:
            log.debug(f"No embedded content for {uri}")
        return content

    def __len__(self) -> int:
        return len(self._contents)
