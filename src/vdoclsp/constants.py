from pathlib import Path

from platformdirs import user_cache_path, user_config_path

_appname = "vdoclsp"
_author = "vdoclsp"

_vdoclsp_pkg_path = Path(__file__).parent.resolve()

VDOCLSP_CACHE_DIR = str(user_cache_path(appname=_appname, appauthor=_author))
VDOCLSP_CONFIG_DIR = str(user_config_path(appname=_appname, appauthor=_author))

DEFAULT_LANGUAGES_FILE = str(_vdoclsp_pkg_path / "resources" / "embedded_languages.yml")
USER_LANGUAGES_FILE = str(Path(VDOCLSP_CONFIG_DIR) / "embedded_languages.yml")

VDOC_FILE_ENCODING = "utf-8"

VDOC_FILE_PREFIX = ".vdoc."
"""Prefix of every file materialized for a virtual document (both transient and persistent)."""

EMBEDDED_CONTENT_SCHEME = "embedded-content"

DEFAULT_HOST_EXTENSIONS = (".qmd", ".rmd", ".md")
DEFAULT_HOST_LANGUAGE_IDS = ("quarto", "rmd", "markdown")
