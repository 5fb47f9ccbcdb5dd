"""
Content materialization for changed files.

Decides per file how much content to fetch under the active content mode,
classifies it as text or binary from its MIME type, and produces a bounded
preview or the full payload.
"""

import codecs
from typing import BinaryIO, Optional

from svnx.client.base import RepositoryClient
from svnx.constants import (
    BINARY_MIME_PREFIXES,
    CONTENT_CHUNK_SIZE,
    CONTENT_ENCODING,
    MIME_TYPE_PROPERTY,
    TRUNCATION_MARKER,
)
from svnx.errors import RepositoryClientError
from svnx.logging import get_logger
from svnx.models import ContentMode, FileContentInfo, NodeKind, RetrievalOptions

logger = get_logger("svnx.retrieval.materializer")


def is_binary_mime_type(mime_type: Optional[str]) -> bool:
    """
    Classify a MIME type as binary.

    Only ``application/*`` and ``image/*`` count as binary, matched as a
    case-sensitive prefix. Anything else, including a missing type, is
    treated as text.
    """
    if not mime_type:
        return False
    return mime_type.startswith(BINARY_MIME_PREFIXES)


def read_bytes(stream: BinaryIO, limit: int) -> bytes:
    """Read at most ``limit`` bytes from ``stream``."""
    chunks = []
    remaining = limit
    while remaining > 0:
        chunk = stream.read(min(remaining, CONTENT_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_text_preview(stream: BinaryIO, length: int) -> str:
    """
    Decode at most ``length`` characters from ``stream``.

    Reading stops as soon as more than ``length`` characters are decoded, so
    memory use is bounded by the preview length rather than the file size.
    Content longer than ``length`` is cut and suffixed with the truncation
    marker.
    """
    decoder = codecs.getincrementaldecoder(CONTENT_ENCODING)(errors="replace")
    text = ""
    while len(text) <= length:
        # One byte per missing character is the least that can complete them
        chunk = stream.read(max(length + 1 - len(text), 1))
        if not chunk:
            text += decoder.decode(b"", final=True)
            break
        text += decoder.decode(chunk)

    if len(text) > length:
        return text[:length] + TRUNCATION_MARKER
    return text


class ContentMaterializer:
    """Builds FileContentInfo for a file at a revision under a content mode"""

    def __init__(self, client: RepositoryClient, options: RetrievalOptions):
        self.client = client
        self.options = options

    def materialize(self, path: str, revision: int) -> Optional[FileContentInfo]:
        """
        Collect size, kind, binary flag and content for one file.

        Args:
            path: Repository-root-relative path
            revision: Revision to read the file at

        Returns:
            FileContentInfo, or None when the content mode is ``none``
        """
        if self.options.content_mode == ContentMode.NONE:
            return None

        size = None
        node_kind = NodeKind.UNKNOWN
        try:
            file_info = self.client.get_file_info(path, revision)
            size = file_info.size
            node_kind = file_info.node_kind
        except RepositoryClientError as e:
            logger.warning(f"Could not get file info for {path}@{revision}: {e}")

        is_binary = False
        try:
            is_binary = is_binary_mime_type(
                self.client.get_property(path, revision, MIME_TYPE_PROPERTY)
            )
        except RepositoryClientError as e:
            logger.warning(
                f"Could not read {MIME_TYPE_PROPERTY} for {path}@{revision}: {e}"
            )

        content = None
        binary_content = None
        try:
            with self.client.open_content(path, revision) as stream:
                if is_binary:
                    binary_content = self._read_binary(stream, size)
                else:
                    content = self._read_text(stream)
        except RepositoryClientError as e:
            logger.warning(f"Could not read content of {path}@{revision}: {e}")
            content = None
            binary_content = None

        return FileContentInfo(
            size=size,
            node_kind=node_kind,
            is_binary=is_binary,
            content=content,
            binary_content=binary_content,
        )

    def _read_binary(self, stream: BinaryIO, size: Optional[int]) -> bytes:
        if self.options.content_mode == ContentMode.FULL:
            return stream.read()
        limit = self.options.preview_length
        if size is not None:
            limit = min(limit, size)
        return read_bytes(stream, limit)

    def _read_text(self, stream: BinaryIO) -> str:
        if self.options.content_mode == ContentMode.FULL:
            return stream.read().decode(CONTENT_ENCODING, errors="replace")
        return read_text_preview(stream, self.options.preview_length)
