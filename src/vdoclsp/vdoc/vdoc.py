"""
Synthesis of virtual documents: single-language views of a host document which keep
every line of the language at its original line index.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from markdown_it.token import Token
from sensai.util import logging

from vdoclsp.document import HostDocument, TextDocument
from vdoclsp.languages import EmbeddedLanguage, LanguageRegistry
from vdoclsp.ls_types import Position
from vdoclsp.markdown import DocumentParser
from vdoclsp.settings import VDocSettings
from vdoclsp.vdoc.blocks import blocks_of_language, language_at

log = logging.getLogger(__name__)

TRAILING_PADDING_LINES = 2
"""Number of padding lines appended to every virtual document (look-ahead slack for the language's tool)."""


@dataclass(frozen=True)
class VirtualDoc:
    language: EmbeddedLanguage
    content: str

    @property
    def line_count(self) -> int:
        return self.content.count("\n")


def virtual_doc_for_language(
    document: TextDocument,
    tokens: Sequence[Token],
    language: EmbeddedLanguage,
    registry: LanguageRegistry,
) -> VirtualDoc:
    """
    Builds the virtual document of the given language: the content lines of all executable blocks of
    the language at their original indices, all other lines replaced by the language's empty line.

    :param document: the host document snapshot
    :param tokens: the token stream parsed from the same snapshot
    :param language: the embedded language to extract
    :param registry: the registry resolving the blocks' languages
    :return: the virtual document, with ``document.line_count + 2 + len(language.inject)`` lines
    """
    line_count = document.line_count
    lines = [language.empty_line] * line_count
    is_block_of_language = blocks_of_language(language, registry)
    for block in tokens:
        if not block.map or not is_block_of_language(block):
            continue
        begin, end = block.map
        # exclude the fence lines; clamp to the document on both sides
        first = max(begin + 1, 0)
        last = min(end - 2, line_count - 1)
        for line in range(first, last + 1):
            lines[line] = document.line_at(line)

    lines.extend([language.empty_line] * TRAILING_PADDING_LINES)
    return virtual_doc_for_code(lines, language)


def virtual_doc_for_code(code: Sequence[str], language: EmbeddedLanguage) -> VirtualDoc:
    """
    Builds a virtual document from already filtered lines by prepending the language's preamble.
    """
    lines = [*language.inject, *code]
    return VirtualDoc(language=language, content="\n".join(lines) + "\n")


def is_host_document(document: HostDocument, settings: VDocSettings) -> bool:
    if document.language_id in settings.host_language_ids:
        return True
    try:
        return settings.is_host_path(document.path)
    except ValueError:
        return False


async def virtual_doc(
    document: HostDocument,
    position: Position,
    engine: DocumentParser,
    registry: LanguageRegistry,
    settings: VDocSettings,
) -> VirtualDoc | None:
    """
    Builds the virtual document for the language of the block at the given position.

    :return: the virtual document, or None if the document cannot host embedded languages or the position
        is not inside a block of a registered language
    """
    if not is_host_document(document, settings):
        return None
    tokens = await engine.parse(document)
    language = language_at(tokens, position, registry)
    if language is None:
        log.debug(f"No embedded language at {document.uri}:{position['line']}")
        return None
    return virtual_doc_for_language(document, tokens, language, registry)
