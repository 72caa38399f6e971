"""
Compressors used by the normalized compression distance.

A compressor is only ever asked one question: how many bytes does this
input compress to? Levels are clamped into each codec's supported range
once, when the compressor is built, so every call in a run uses the same
level.
"""

import bz2
import gzip
import lzma
import zlib
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..errors import ComputationError, ConfigurationError
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class Compressor(ABC):
    """Compressed-length oracle with a clamped compression level."""

    name: str = "compressor"
    min_level: int = 0
    max_level: int = 9
    default_level: int = 6

    def __init__(self, level: Optional[int] = None):
        self.level = self.clamp_level(level)

    @classmethod
    def clamp_level(cls, level: Optional[int]) -> int:
        """Clamp ``level`` into ``[min_level, max_level]``; ``None`` means default."""
        if level is None:
            return cls.default_level
        clamped = max(cls.min_level, min(cls.max_level, int(level)))
        if clamped != level:
            logger.debug(f"Clamped {cls.name} level {level} to {clamped}")
        return clamped

    @abstractmethod
    def _compress(self, data: bytes) -> bytes:
        """Return the compressed bytes."""

    def compress(self, data: bytes) -> int:
        """
        Compressed size of ``data`` in bytes.

        Raises:
            ComputationError: The underlying codec failed
        """
        try:
            return len(self._compress(data))
        except Exception as e:
            raise ComputationError(
                f"{self.name} compression failed: {e}", codec=self.name
            ) from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(level={self.level})"


class ZlibCompressor(Compressor):
    name = "zlib"

    def _compress(self, data: bytes) -> bytes:
        return zlib.compress(data, self.level)


class GzipCompressor(Compressor):
    name = "gzip"

    def _compress(self, data: bytes) -> bytes:
        # Fixed mtime keeps the header, and so the size, reproducible
        return gzip.compress(data, compresslevel=self.level, mtime=0)


class DeflateCompressor(Compressor):
    """Raw deflate stream without zlib header or checksum."""

    name = "deflate"

    def _compress(self, data: bytes) -> bytes:
        compressor = zlib.compressobj(self.level, zlib.DEFLATED, -zlib.MAX_WBITS)
        return compressor.compress(data) + compressor.flush()


class XzCompressor(Compressor):
    name = "xz"

    def _compress(self, data: bytes) -> bytes:
        return lzma.compress(data, format=lzma.FORMAT_XZ, preset=self.level)


class Bzip2Compressor(Compressor):
    name = "bzip2"
    min_level = 1
    default_level = 9

    def _compress(self, data: bytes) -> bytes:
        return bz2.compress(data, compresslevel=self.level)


COMPRESSORS: Dict[str, type] = {
    cls.name: cls for cls in (
        ZlibCompressor,
        GzipCompressor,
        DeflateCompressor,
        XzCompressor,
        Bzip2Compressor,
    )
}


def get_compressor(name: str, level: Optional[int] = None) -> Compressor:
    """
    Build a compressor by codec name.

    Args:
        name: Codec name (see ``COMPRESSORS``)
        level: Compression level; clamped, ``None`` selects the codec default

    Raises:
        ConfigurationError: Unknown codec
    """
    key = name.lower()
    if key not in COMPRESSORS:
        raise ConfigurationError(
            f"Unknown compressor '{name}'. Available: {', '.join(COMPRESSORS)}",
            parameter="compressor",
        )
    return COMPRESSORS[key](level)
