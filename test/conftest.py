import pathlib

import pytest

from vdoclsp.document import HostDocument
from vdoclsp.languages import LanguageRegistry
from vdoclsp.markdown import MarkdownEngine
from vdoclsp.settings import VDocSettings

RESOURCES_DIR = pathlib.Path(__file__).parent / "resources" / "vdoc"


@pytest.fixture(scope="session")
def registry() -> LanguageRegistry:
    return LanguageRegistry.load_default(include_user_file=False)


@pytest.fixture()
def engine() -> MarkdownEngine:
    return MarkdownEngine()


@pytest.fixture()
def vdoc_settings(tmp_path: pathlib.Path) -> VDocSettings:
    return VDocSettings(vdoclsp_dir=str(tmp_path / "vdoclsp"))


@pytest.fixture()
def analysis_document(tmp_path: pathlib.Path) -> HostDocument:
    """The sample Quarto document, copied to a temporary project directory."""
    path = tmp_path / "project" / "analysis.qmd"
    path.parent.mkdir()
    path.write_text((RESOURCES_DIR / "project" / "analysis.qmd").read_text(encoding="utf-8"), encoding="utf-8")
    return HostDocument.from_file(str(path))
