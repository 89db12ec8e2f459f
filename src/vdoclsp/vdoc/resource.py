"""
Materialization of virtual documents as uris for a language's tool, and their scoped disposal.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from sensai.util import logging
from sensai.util.string import ToStringMixin

from vdoclsp.languages import VDocType
from vdoclsp.settings import VDocSettings
from vdoclsp.util.paths import path_to_uri
from vdoclsp.vdoc.content_store import EmbeddedContentStore
from vdoclsp.vdoc.tempfile_store import TempFileStore
from vdoclsp.vdoc.vdoc import VirtualDoc

log = logging.getLogger(__name__)

T = TypeVar("T")


class VirtualDocAction(StrEnum):
    COMPLETION = "completion"
    HOVER = "hover"
    SIGNATURE = "signature"
    DEFINITION = "definition"
    FORMAT = "format"


LOCAL_ACTIONS = frozenset({VirtualDocAction.FORMAT, VirtualDocAction.DEFINITION})
"""Actions served from a transient file next to the parent document (to pick up project paths and formatting config)."""


@dataclass(frozen=True)
class VirtualDocUri:
    uri: str
    cleanup: Callable[[], Awaitable[None]] | None = None
    """Disposes of the backing resource; owned by the receiver of the handle until passed to :func:`with_uri`."""


def is_local(virtual_doc: VirtualDoc, action: VirtualDocAction) -> bool:
    """
    Whether the action is served from a transient resource. Languages whose tool cannot cope with its
    document being closed always use a persistent resource.
    """
    return action in LOCAL_ACTIONS and not virtual_doc.language.reuse_vdoc


class VirtualDocResources(ToStringMixin):
    """
    Decides on and manages the backing resources of virtual documents.
    """

    def __init__(self, settings: VDocSettings | None = None):
        self.settings = settings or VDocSettings()
        self.content_store = EmbeddedContentStore(
            max_entries=self.settings.content_cache_entries,
            max_memory_mb=self.settings.content_cache_memory_mb,
        )
        self.file_store = TempFileStore(self.settings.vdoc_dir, encoding=self.settings.encoding)

    def _tostring_includes(self) -> list[str]:
        return ["settings"]

    async def resolve_uri(self, virtual_doc: VirtualDoc, parent_uri: str, action: VirtualDocAction) -> VirtualDocUri:
        """
        Materializes the virtual document for the given action.

        :param virtual_doc: the virtual document
        :param parent_uri: the uri of the host document it was built from
        :param action: the request the uri is used for
        :return: the handle; it carries a cleanup only if a transient file was created
        :raises VDocResourceError: if the backing file cannot be written
        """
        if virtual_doc.language.type == VDocType.CONTENT:
            return VirtualDocUri(uri=self.content_store.add(virtual_doc, parent_uri))

        if is_local(virtual_doc, action):
            path = await self.file_store.create_transient(virtual_doc, parent_uri)
            return VirtualDocUri(uri=path_to_uri(path), cleanup=_deleter(self.file_store, path))

        record = await self.file_store.materialize(virtual_doc, parent_uri)
        return VirtualDocUri(uri=path_to_uri(record.path))


def _deleter(file_store: TempFileStore, path: str) -> Callable[[], Awaitable[None]]:
    async def cleanup() -> None:
        await file_store.delete(path)

    return cleanup


async def with_uri(virtual_doc_uri: VirtualDocUri, action: Callable[[str], Awaitable[T]]) -> T:
    """
    Runs the action with the handle's uri and disposes of the handle's resource afterwards, whether the
    action returned or raised. A failing disposal is logged; the action's result or exception is always
    what the caller receives.
    """
    try:
        return await action(virtual_doc_uri.uri)
    finally:
        if virtual_doc_uri.cleanup is not None:
            try:
                await virtual_doc_uri.cleanup()
            except Exception as e:
                log.warning(f"Failed to dispose of virtual document {virtual_doc_uri.uri}: {e}")
