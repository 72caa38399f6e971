"""Compression codecs and the normalized compression distance."""

from .codecs import COMPRESSORS, Compressor, get_compressor
from .ncd import NCD

__all__ = ["COMPRESSORS", "Compressor", "get_compressor", "NCD"]
