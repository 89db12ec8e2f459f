"""
Parsing of host documents into markdown-it token streams.
"""

from abc import ABC, abstractmethod

from markdown_it import MarkdownIt
from markdown_it.token import Token
from overrides import override
from sensai.util import logging

from vdoclsp.document import HostDocument
from vdoclsp.util.lru_cache import LRUCache

log = logging.getLogger(__name__)


class DocumentParser(ABC):
    """
    Turns a host document into a flat token stream in which fenced code blocks carry their
    line range (``map``) and info string.
    """

    @abstractmethod
    async def parse(self, document: HostDocument) -> list[Token]:
        """
        Parses the document. Calls for an unchanged document must yield equivalent token streams.
        """


class MarkdownEngine(DocumentParser):
    """
    markdown-it based parser, caching the token stream of the most recently parsed versions of each document.
    """

    def __init__(self, max_cached_documents: int = 32):
        self._md = MarkdownIt("commonmark")
        self._cache: LRUCache[str, tuple[int, str, list[Token]]] = LRUCache(max_entries=max_cached_documents)

    @override
    async def parse(self, document: HostDocument) -> list[Token]:
        cached = self._cache.get(document.uri)
        if cached is not None:
            version, text, tokens = cached
            if version == document.version and text == document.text:
                return tokens
        tokens = self._md.parse(document.text)
        log.debug(f"Parsed {document.uri} (version {document.version}) into {len(tokens)} tokens")
        self._cache.put(document.uri, (document.version, document.text, tokens))
        return tokens
