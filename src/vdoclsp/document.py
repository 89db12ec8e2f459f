"""
Host documents: the composite documents in which embedded languages live.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Self

from vdoclsp.util.paths import path_to_uri, uri_to_path


class TextDocument(Protocol):
    """Read access to the lines of a host document; must be stable for the duration of one synthesis."""

    @property
    def uri(self) -> str: ...

    @property
    def line_count(self) -> int: ...

    def line_at(self, index: int) -> str: ...


@dataclass(frozen=True)
class HostDocument:
    """
    An immutable snapshot of a host document.

    Lines are separated by ``\\n`` (a preceding ``\\r`` is dropped), so a text ending with a newline
    has a final empty line, as in an editor.
    """

    uri: str
    text: str
    version: int = 0
    language_id: str = "quarto"
    _lines: list[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lines = [line.removesuffix("\r") for line in self.text.split("\n")]
        object.__setattr__(self, "_lines", lines)

    @classmethod
    def from_file(cls, path: str, encoding: str = "utf-8", language_id: str = "quarto") -> Self:
        text = Path(path).read_text(encoding=encoding)
        return cls(uri=path_to_uri(path), text=text, language_id=language_id)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, index: int) -> str:
        return self._lines[index]

    @property
    def path(self) -> str:
        return uri_to_path(self.uri)

    def with_text(self, text: str) -> "HostDocument":
        """
        :return: the snapshot superseding this one after an edit
        """
        return HostDocument(uri=self.uri, text=text, version=self.version + 1, language_id=self.language_id)
