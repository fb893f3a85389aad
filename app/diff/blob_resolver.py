from dataclasses import dataclass
from typing import Optional, Protocol

from app.core.logging_config import get_logger

logger = get_logger(__name__)


class BlobSource(Protocol):
    """The part of the git service the resolver needs."""

    def read_blob(self, ref: str, path: str) -> Optional[bytes]: ...


@dataclass(frozen=True)
class Blob:
    """File content at a ref. ``content`` is None when the file is absent."""

    content: Optional[str]
    is_binary: bool = False

    @property
    def exists(self) -> bool:
        return self.is_binary or self.content is not None


ABSENT = Blob(content=None)


def is_binary_content(data: bytes) -> bool:
    """Content with a NUL byte is binary."""
    return b"\0" in data


class BlobResolver:
    """Turns raw blob bytes into text or a binary marker."""

    def __init__(self, source: BlobSource):
        self._source = source

    def resolve(self, ref: str, path: str) -> Blob:
        """
        Read ``path`` at ``ref``.

        Raises:
            RefResolutionError: If ``ref`` itself cannot be resolved
            BlobReadError: If the file exists but cannot be read
        """
        data = self._source.read_blob(ref, path)
        if data is None:
            return ABSENT
        if is_binary_content(data):
            logger.debug(f"Binary content for {path} at {ref}")
            return Blob(content=None, is_binary=True)
        return Blob(content=data.decode("utf-8", errors="replace"))
