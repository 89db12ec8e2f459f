"""
Mapping of positions between a host document and a virtual document.

A virtual document holds every host line at the same index, shifted down by the
language's injected preamble, so the mapping is a constant line offset.
"""

from vdoclsp.languages import EmbeddedLanguage
from vdoclsp.ls_types import Position, Range


def to_virtual_position(language: EmbeddedLanguage, position: Position) -> Position:
    return Position(line=position["line"] + len(language.inject), character=position["character"])


def to_host_position(language: EmbeddedLanguage, position: Position) -> Position:
    """
    Maps a position in the virtual document back to the host document.
    The result is not clamped: positions inside the preamble map to negative lines.
    """
    return Position(line=position["line"] - len(language.inject), character=position["character"])


def to_virtual_range(language: EmbeddedLanguage, range: Range) -> Range:
    return Range(start=to_virtual_position(language, range["start"]), end=to_virtual_position(language, range["end"]))


def to_host_range(language: EmbeddedLanguage, range: Range) -> Range:
    return Range(start=to_host_position(language, range["start"]), end=to_host_position(language, range["end"]))
