"""
LSP-shaped position types used on both sides of the host/virtual mapping.
"""

from typing import TypedDict


class Position(TypedDict):
    """A zero-based position inside a text document."""

    line: int
    """Line position in a document (zero-based)."""

    character: int
    """Character offset on a line in a document (zero-based)."""


class Range(TypedDict):
    """A range in a text document expressed as (zero-based) start and end positions."""

    start: Position
    end: Position


def make_position(line: int, character: int) -> Position:
    return Position(line=line, character=character)


def make_range(start_line: int, start_character: int, end_line: int, end_character: int) -> Range:
    return Range(start=make_position(start_line, start_character), end=make_position(end_line, end_character))
