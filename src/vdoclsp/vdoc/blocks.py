"""
Location of fenced language blocks in a host document's token stream.
"""

from collections.abc import Callable, Sequence

from markdown_it.token import Token

from vdoclsp.languages import EmbeddedLanguage, LanguageRegistry, LanguageTally
from vdoclsp.ls_types import Position


def block_at(tokens: Sequence[Token], position: Position) -> Token | None:
    """
    Finds the innermost fenced block whose content contains the given position.
    Positions on the opening or closing fence line are not inside the block.

    :param tokens: the token stream of the host document
    :param position: a position in host coordinates
    :return: the block, or None if the position is not inside any block's content
    """
    line = position["line"]
    innermost: Token | None = None
    for block in tokens:
        if not LanguageRegistry.is_language_block(block) or not block.map:
            continue
        begin, end = block.map
        if begin < line < end - 1:
            if innermost is None or (end - begin) <= (innermost.map[1] - innermost.map[0]):  # type: ignore[index]
                innermost = block
    return innermost


def language_at(tokens: Sequence[Token], position: Position, registry: LanguageRegistry) -> EmbeddedLanguage | None:
    block = block_at(tokens, position)
    if block is None:
        return None
    return registry.language_of(block)


def blocks_of_language(language: EmbeddedLanguage, registry: LanguageRegistry) -> Callable[[Token], bool]:
    """
    :return: a predicate matching the executable blocks whose language shares an id with the given language
    """

    def is_block_of_language(block: Token) -> bool:
        if not registry.is_executable(block):
            return False
        block_language = registry.language_of(block)
        return block_language is not None and block_language.matches(language)

    return is_block_of_language


def dominant_language(
    tokens: Sequence[Token],
    registry: LanguageRegistry,
    filter: Callable[[EmbeddedLanguage], bool] | None = None,
) -> EmbeddedLanguage | None:
    """
    Determines the language used by most executable blocks of the document.

    :param tokens: the token stream of the host document
    :param registry: the registry resolving the blocks' languages
    :param filter: if given, only languages satisfying it are considered
    :return: the most frequent language (on ties, the one whose first block comes first in the document),
        or None if no executable block has a registered language
    """
    tally = LanguageTally()
    for block in tokens:
        if not registry.is_executable(block):
            continue
        language = registry.language_of(block)
        if language is not None and (filter is None or filter(language)):
            tally.add(language)
    return tally.most_common()
