"""
Embedded language descriptors and the registry that resolves fence info strings to them.
"""

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self

import yaml
from markdown_it.token import Token
from sensai.util import logging
from sensai.util.string import ToStringMixin

from vdoclsp.constants import DEFAULT_LANGUAGES_FILE, USER_LANGUAGES_FILE
from vdoclsp.ls_exceptions import LanguageConfigError

log = logging.getLogger(__name__)

# {python}, {r echo=FALSE}, {julia, label="x"}; raw blocks such as {=html} are not executed
EXECUTABLE_INFO_RE = re.compile(r"^\{([a-zA-Z0-9_\-]+)(?:[\s,].*)?\}\s*$")
LANGUAGE_NAME_RE = re.compile(r"^\{?[.=]?([a-zA-Z0-9_\-]+)")


class VDocType(StrEnum):
    CONTENT = "content"
    """The virtual document may be served from memory under a content-addressed uri."""
    FILE = "file"
    """The language's tool needs a real file on disk."""


@dataclass(frozen=True)
class EmbeddedLanguage(ToStringMixin):
    """
    Describes how virtual documents are synthesized and materialized for one embedded language.
    Instances are owned by a :class:`LanguageRegistry` and must be treated as immutable.
    """

    ids: tuple[str, ...]
    """All spellings of the language in a fence info string; the first one is the canonical name."""
    extension: str
    type: VDocType = VDocType.CONTENT
    empty_line: str = ""
    """Padding for lines not belonging to the language; must be harmless to the language's parser."""
    inject: tuple[str, ...] = ()
    """Preamble prepended to every virtual document of the language."""
    reuse_vdoc: bool = False
    """Whether the language's tool breaks when its document is closed and reopened (forces a persistent resource)."""
    trigger_characters: tuple[str, ...] = ()
    can_format: bool = False

    def __post_init__(self) -> None:
        if len(self.ids) == 0:
            raise LanguageConfigError("An embedded language requires at least one id")

    def _tostring_includes(self) -> list[str]:
        return ["ids", "type", "reuse_vdoc"]

    @property
    def id(self) -> str:
        return self.ids[0]

    def matches(self, other: "EmbeddedLanguage") -> bool:
        """Whether the two descriptors share at least one id."""
        return not set(self.ids).isdisjoint(other.ids)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        if not isinstance(data, dict):
            raise LanguageConfigError(f"Embedded language definition must be a mapping, got {data!r}")
        data = dict(data)
        ids = _string_tuple(data.pop("ids", None), "ids", "<unnamed>")
        if not ids or not all(ids):
            raise LanguageConfigError(f"Embedded language definition without ids: {data}")
        language_id = ids[0]
        try:
            vdoc_type = VDocType(data.pop("type", VDocType.CONTENT))
        except ValueError as e:
            raise LanguageConfigError(f"Invalid vdoc type for language {language_id}", cause=e) from e
        extension = data.pop("extension", language_id)
        try:
            return cls(
                ids=tuple(i.lower() for i in ids),
                extension=extension,
                type=vdoc_type,
                empty_line=data.pop("empty_line", ""),
                inject=_string_tuple(data.pop("inject", ()), "inject", language_id),
                reuse_vdoc=bool(data.pop("reuse_vdoc", False)),
                trigger_characters=_string_tuple(data.pop("trigger_characters", ()), "trigger_characters", language_id),
                can_format=bool(data.pop("can_format", False)),
                **data,
            )
        except TypeError as e:
            raise LanguageConfigError(f"Invalid definition for embedded language {language_id}", cause=e) from e


def _string_tuple(value: Any, key: str, language_id: str) -> tuple[str, ...]:
    """
    Reads a list-valued setting of a language definition. A single string stands for a one-element list.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise LanguageConfigError(f"'{key}' of embedded language {language_id} must be a string or a list of strings, got {value!r}")


class LanguageRegistry(ToStringMixin):
    """
    Maps fence info strings to :class:`EmbeddedLanguage` descriptors.
    A language registered later replaces an earlier one with the same canonical id.
    """

    def __init__(self, languages: Iterable[EmbeddedLanguage] = ()):
        self._languages: dict[str, EmbeddedLanguage] = {}
        self._by_id: dict[str, EmbeddedLanguage] = {}
        for language in languages:
            self.register(language)

    def _tostring_includes(self) -> list[str]:
        return ["_languages"]

    def register(self, language: EmbeddedLanguage) -> None:
        replaced = self._languages.get(language.id)
        if replaced is not None:
            log.debug(f"Replacing embedded language definition {replaced} with {language}")
            for alias in replaced.ids:
                self._by_id.pop(alias, None)
        self._languages[language.id] = language
        for alias in language.ids:
            self._by_id[alias] = language

    @property
    def languages(self) -> list[EmbeddedLanguage]:
        return list(self._languages.values())

    def resolve(self, identifier: str) -> EmbeddedLanguage | None:
        """
        :param identifier: a language id or one of its aliases (case-insensitive)
        :return: the language, or None if the identifier is not registered
        """
        return self._by_id.get(identifier.lower())

    @staticmethod
    def is_language_block(block: Token) -> bool:
        return block.type == "fence" and len(block.info.strip()) > 0

    @staticmethod
    def is_executable(block: Token) -> bool:
        """Whether the block is executed when the document is rendered (as opposed to a purely illustrative fence)."""
        return LanguageRegistry.is_language_block(block) and EXECUTABLE_INFO_RE.match(block.info.strip()) is not None

    @staticmethod
    def name_of(block: Token) -> str:
        match = LANGUAGE_NAME_RE.match(block.info.strip())
        if match is None:
            return ""
        return match.group(1).lower()

    def language_of(self, block: Token) -> EmbeddedLanguage | None:
        return self.resolve(self.name_of(block))

    def load_yaml(self, path: str) -> None:
        """
        Registers the languages defined in the given YAML file, which must have a top-level ``languages`` list.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict) or not isinstance(data.get("languages", []), list):
            raise LanguageConfigError(f"Expected a top-level 'languages' list in {path}")
        for entry in data.get("languages", []):
            self.register(EmbeddedLanguage.from_dict(entry))
        log.debug(f"Loaded embedded languages from {path}")

    @classmethod
    def from_yaml(cls, path: str) -> Self:
        registry = cls()
        registry.load_yaml(path)
        return registry

    @classmethod
    def load_default(cls, extra_files: Iterable[str] = (), include_user_file: bool = True) -> Self:
        """
        Loads the bundled language table, followed by the user's language file (if present) and the given extra files.
        """
        registry = cls.from_yaml(DEFAULT_LANGUAGES_FILE)
        override_files: list[str] = []
        if include_user_file and os.path.exists(USER_LANGUAGES_FILE):
            override_files.append(USER_LANGUAGES_FILE)
        override_files.extend(extra_files)
        for path in override_files:
            registry.load_yaml(path)
        return registry


@dataclass
class LanguageTally:
    """Occurrence counts of embedded languages, remembering the order in which languages were first seen."""

    counts: dict[str, int] = field(default_factory=dict)
    languages: dict[str, EmbeddedLanguage] = field(default_factory=dict)

    def add(self, language: EmbeddedLanguage) -> None:
        if language.id not in self.counts:
            self.counts[language.id] = 0
            self.languages[language.id] = language
        self.counts[language.id] += 1

    def most_common(self) -> EmbeddedLanguage | None:
        """
        :return: the language with the highest count; on ties, the one that was seen first
        """
        best_id: str | None = None
        best_count = 0
        for language_id, count in self.counts.items():
            if count > best_count:
                best_id, best_count = language_id, count
        return None if best_id is None else self.languages[best_id]
