"""Tests for embedded language descriptors and the language registry."""

import pytest
from markdown_it.token import Token

from vdoclsp.languages import EmbeddedLanguage, LanguageRegistry, LanguageTally, VDocType
from vdoclsp.ls_exceptions import LanguageConfigError


def fence(info: str, begin: int = 0, end: int = 3) -> Token:
    return Token(type="fence", tag="code", nesting=0, map=[begin, end], info=info)


class TestEmbeddedLanguage:
    def test_from_dict_defaults(self) -> None:
        language = EmbeddedLanguage.from_dict({"ids": ["Python", "py"]})
        assert language.ids == ("python", "py")
        assert language.id == "python"
        assert language.extension == "Python"
        assert language.type == VDocType.CONTENT
        assert language.empty_line == ""
        assert language.inject == ()
        assert not language.reuse_vdoc

    def test_from_dict_single_id_string(self) -> None:
        language = EmbeddedLanguage.from_dict({"ids": "sql", "type": "file", "inject": ["-- header"]})
        assert language.ids == ("sql",)
        assert language.type == VDocType.FILE
        assert language.inject == ("-- header",)

    def test_from_dict_without_ids(self) -> None:
        with pytest.raises(LanguageConfigError):
            EmbeddedLanguage.from_dict({"extension": "py"})

    def test_from_dict_invalid_type(self) -> None:
        with pytest.raises(LanguageConfigError):
            EmbeddedLanguage.from_dict({"ids": ["python"], "type": "socket"})

    def test_from_dict_unknown_key(self) -> None:
        with pytest.raises(LanguageConfigError):
            EmbeddedLanguage.from_dict({"ids": ["python"], "colour": "blue"})

    def test_from_dict_rejects_non_mapping(self) -> None:
        with pytest.raises(LanguageConfigError):
            EmbeddedLanguage.from_dict("python")  # type: ignore[arg-type]

    @pytest.mark.parametrize("ids", [5, [], "", [["python"]], {"python": True}])
    def test_from_dict_rejects_malformed_ids(self, ids: object) -> None:
        with pytest.raises(LanguageConfigError):
            EmbeddedLanguage.from_dict({"ids": ids})

    def test_from_dict_single_inject_string(self) -> None:
        language = EmbeddedLanguage.from_dict({"ids": ["r"], "inject": "# !diagnostics off", "trigger_characters": "$"})
        assert language.inject == ("# !diagnostics off",)
        assert language.trigger_characters == ("$",)

    @pytest.mark.parametrize("key", ["inject", "trigger_characters"])
    @pytest.mark.parametrize("value", [7, ["# header", 3], {"line": "# header"}])
    def test_from_dict_rejects_malformed_lists(self, key: str, value: object) -> None:
        with pytest.raises(LanguageConfigError):
            EmbeddedLanguage.from_dict({"ids": ["r"], key: value})

    def test_matches_on_shared_id(self) -> None:
        javascript = EmbeddedLanguage(ids=("javascript", "js"), extension="js")
        ojs = EmbeddedLanguage(ids=("ojs", "js"), extension="js")
        python = EmbeddedLanguage(ids=("python",), extension="py")
        assert javascript.matches(ojs)
        assert not javascript.matches(python)


class TestLanguageRegistry:
    def test_default_table(self, registry: LanguageRegistry) -> None:
        python = registry.resolve("python")
        assert python is not None
        assert registry.resolve("py") is python
        assert registry.resolve("PY") is python
        assert python.inject == ("# type: ignore", "# flake8: noqa")
        julia = registry.resolve("julia")
        assert julia is not None and julia.type == VDocType.FILE
        assert registry.resolve("cobol") is None
        assert len({language.id for language in registry.languages}) == len(registry.languages)

    def test_later_definition_replaces_earlier(self, tmp_path) -> None:
        overrides = tmp_path / "languages.yml"
        overrides.write_text(
            "languages:\n"
            "  - ids: [python]\n"
            "    extension: py\n"
            "    type: file\n"
            "    reuse_vdoc: true\n"
            "  - ids: [nim]\n"
            "    extension: nim\n",
            encoding="utf-8",
        )
        registry = LanguageRegistry.load_default(extra_files=[str(overrides)], include_user_file=False)
        python = registry.resolve("python")
        assert python is not None
        assert python.type == VDocType.FILE
        assert python.reuse_vdoc
        # the alias of the replaced definition is gone
        assert registry.resolve("py") is None
        assert registry.resolve("nim") is not None

    def test_load_yaml_requires_language_list(self, tmp_path) -> None:
        path = tmp_path / "languages.yml"
        path.write_text("languages: python\n", encoding="utf-8")
        with pytest.raises(LanguageConfigError):
            LanguageRegistry.from_yaml(str(path))

    @pytest.mark.parametrize(
        "entry",
        [
            "  - python\n",
            "  - ids: 5\n",
            "  - ids: [julia]\n    inject: 5\n",
        ],
    )
    def test_load_yaml_rejects_malformed_entry(self, tmp_path, entry: str) -> None:
        path = tmp_path / "languages.yml"
        path.write_text("languages:\n" + entry, encoding="utf-8")
        with pytest.raises(LanguageConfigError):
            LanguageRegistry.from_yaml(str(path))

    @pytest.mark.parametrize(
        ("info", "executable"),
        [
            ("{python}", True),
            ("{r echo=FALSE}", True),
            ("{julia, label=\"fig\"}", True),
            ("python", False),
            ("{=html}", False),
            ("{.python}", False),
        ],
    )
    def test_is_executable(self, info: str, executable: bool) -> None:
        assert LanguageRegistry.is_executable(fence(info)) is executable

    def test_plain_fence_is_not_a_language_block(self) -> None:
        assert not LanguageRegistry.is_language_block(fence(""))
        assert not LanguageRegistry.is_language_block(Token(type="code_block", tag="code", nesting=0, map=[0, 2]))

    @pytest.mark.parametrize(
        ("info", "name"),
        [
            ("{python}", "python"),
            ("{R echo=FALSE}", "r"),
            ("python", "python"),
            ("{.python}", "python"),
            ("{=html}", "html"),
            ("{}", ""),
        ],
    )
    def test_name_of(self, info: str, name: str) -> None:
        assert LanguageRegistry.name_of(fence(info)) == name

    def test_language_of(self, registry: LanguageRegistry) -> None:
        assert registry.language_of(fence("{py}")) is registry.resolve("python")
        assert registry.language_of(fence("{cobol}")) is None


class TestLanguageTally:
    def test_empty(self) -> None:
        assert LanguageTally().most_common() is None

    def test_tie_goes_to_first_seen(self) -> None:
        r = EmbeddedLanguage(ids=("r",), extension="r")
        python = EmbeddedLanguage(ids=("python",), extension="py")
        tally = LanguageTally()
        for language in (r, python, python, r):
            tally.add(language)
        assert tally.most_common() is r

    def test_highest_count_wins(self) -> None:
        r = EmbeddedLanguage(ids=("r",), extension="r")
        python = EmbeddedLanguage(ids=("python",), extension="py")
        tally = LanguageTally()
        for language in (r, python, python):
            tally.add(language)
        assert tally.most_common() is python
        assert tally.counts == {"r": 1, "python": 2}
