"""
Entry point for providers (completion, hover, signature help, definition, formatting) that forward
requests on a host document to the tool of one embedded language.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sensai.util import logging
from sensai.util.logging import LogTime
from sensai.util.string import ToStringMixin

from vdoclsp.document import HostDocument
from vdoclsp.languages import EmbeddedLanguage, LanguageRegistry
from vdoclsp.ls_types import Position
from vdoclsp.markdown import DocumentParser, MarkdownEngine
from vdoclsp.settings import VDocSettings
from vdoclsp.util.async_io import shutdown_executor
from vdoclsp.vdoc.blocks import dominant_language
from vdoclsp.vdoc.positions import to_virtual_position
from vdoclsp.vdoc.resource import VirtualDocAction, VirtualDocResources, with_uri
from vdoclsp.vdoc.vdoc import is_host_document, virtual_doc, virtual_doc_for_language

log = logging.getLogger(__name__)

T = TypeVar("T")

PositionHandler = Callable[[str, Position, EmbeddedLanguage], Awaitable[T]]
"""Forwards a request to the language's tool: receives the virtual document's uri, the position mapped into it and the language."""
DocumentHandler = Callable[[str, EmbeddedLanguage], Awaitable[T]]


class EmbeddedLanguageService(ToStringMixin):
    def __init__(
        self,
        registry: LanguageRegistry | None = None,
        engine: DocumentParser | None = None,
        settings: VDocSettings | None = None,
    ):
        self.settings = settings or VDocSettings()
        self.registry = registry or LanguageRegistry.load_default(extra_files=self.settings.extra_languages_files)
        self.engine = engine or MarkdownEngine()
        self.resources = VirtualDocResources(self.settings)

    def _tostring_includes(self) -> list[str]:
        return ["settings", "registry"]

    def provide_content(self, uri: str) -> str | None:
        """
        Serves an in-memory virtual document to the tool that received its uri.
        """
        return self.resources.content_store.provide_content(uri)

    def completion_trigger_characters(self) -> list[str]:
        """
        :return: the characters of all registered languages that should trigger completion in a host document
        """
        characters: set[str] = set()
        for language in self.registry.languages:
            characters.update(language.trigger_characters)
        return sorted(characters)

    @staticmethod
    def shutdown() -> None:
        """
        Waits for pending virtual document file operations and releases the threads performing them.
        Persistent files are left in place.
        """
        shutdown_executor()

    async def request(
        self,
        document: HostDocument,
        position: Position,
        action: VirtualDocAction,
        handler: PositionHandler[T],
    ) -> T | None:
        """
        Forwards a request at a position of the host document to the tool of the embedded language at that position.
        Results referring to the virtual document must be mapped back with :mod:`vdoclsp.vdoc.positions`.

        :return: the handler's result, or None if there is no embedded language at the position or the language
            does not support the action
        """
        vdoc = await virtual_doc(document, position, self.engine, self.registry, self.settings)
        if vdoc is None:
            return None
        language = vdoc.language
        if action == VirtualDocAction.FORMAT and not language.can_format:
            log.debug(f"Formatting is not supported for {language.id}")
            return None

        virtual_position = to_virtual_position(language, position)
        vdoc_uri = await self.resources.resolve_uri(vdoc, document.uri, action)
        return await with_uri(vdoc_uri, lambda uri: handler(uri, virtual_position, language))

    async def request_main_language(
        self,
        document: HostDocument,
        action: VirtualDocAction,
        handler: DocumentHandler[T],
        filter: Callable[[EmbeddedLanguage], bool] | None = None,
    ) -> T | None:
        """
        Forwards a whole-document request (e.g. diagnostics) to the tool of the document's dominant language.

        :param filter: restricts the languages considered, e.g. to those a tool is available for
        :return: the handler's result, or None if the document has no executable block of a registered language
        """
        if not is_host_document(document, self.settings):
            return None
        tokens = await self.engine.parse(document)
        language = dominant_language(tokens, self.registry, filter)
        if language is None:
            return None
        with LogTime(f"Virtual document for {document.uri} ({language.id})", logger=log):
            vdoc = virtual_doc_for_language(document, tokens, language, self.registry)
            vdoc_uri = await self.resources.resolve_uri(vdoc, document.uri, action)
        return await with_uri(vdoc_uri, lambda uri: handler(uri, language))
