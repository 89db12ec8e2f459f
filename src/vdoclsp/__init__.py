__version__ = "0.1.0"

from vdoclsp.languages import EmbeddedLanguage, LanguageRegistry, VDocType
from vdoclsp.vdoc.vdoc import VirtualDoc

__all__ = [
    "EmbeddedLanguage",
    "LanguageRegistry",
    "VDocType",
    "VirtualDoc",
]
