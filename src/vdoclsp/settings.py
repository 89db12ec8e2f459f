"""
Defines settings for the virtual document layer
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from sensai.util.string import ToStringMixin

from vdoclsp.constants import DEFAULT_HOST_EXTENSIONS, DEFAULT_HOST_LANGUAGE_IDS, VDOC_FILE_ENCODING, VDOCLSP_CACHE_DIR


@dataclass
class VDocSettings(ToStringMixin):
    vdoclsp_dir: str = VDOCLSP_CACHE_DIR

    host_extensions: tuple[str, ...] = DEFAULT_HOST_EXTENSIONS
    """File extensions of documents that may host embedded languages."""
    host_language_ids: tuple[str, ...] = DEFAULT_HOST_LANGUAGE_IDS
    """Editor language ids of documents that may host embedded languages."""

    encoding: str = VDOC_FILE_ENCODING

    # in-memory content handles
    content_cache_entries: int = 256
    content_cache_memory_mb: int = 64

    extra_languages_files: list[str] = field(default_factory=list)
    """YAML files with additional or overriding embedded language definitions."""

    def __post_init__(self) -> None:
        os.makedirs(self.vdoc_dir, exist_ok=True)

    def _tostring_includes(self) -> list[str]:
        return ["vdoclsp_dir", "host_extensions", "host_language_ids"]

    @property
    def vdoc_dir(self) -> str:
        """Directory holding the persistent virtual document files."""
        return os.path.join(self.vdoclsp_dir, "vdocs")

    def is_host_path(self, path: str) -> bool:
        return Path(path).suffix.lower() in self.host_extensions
