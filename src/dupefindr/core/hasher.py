"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements full-content file hashing with pluggable hash algorithms.

Files are streamed in fixed-size chunks so memory stays bounded for large
files. Equal size + equal digest is treated as identical content.
"""

import hashlib

import xxhash

from dupefindr.core.errors import ConfigError, HashError
from dupefindr.core.interfaces import HashAlgorithm, HashState
from dupefindr.core.models import FileEntry, DEFAULT_CHUNK_SIZE


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    def __init__(self, bits: int = 64):
        if bits not in (64, 128):
            raise ValueError("xxHash supports 64 or 128 bit digests")
        self.bits = bits
        self.name = f"xxh{bits}"

    def new(self) -> HashState:
        return xxhash.xxh64() if self.bits == 64 else xxhash.xxh3_128()


class MD5AlgorithmImpl(HashAlgorithm):
    name = "md5"

    def new(self) -> HashState:
        return hashlib.md5()


def get_algorithm(name: str) -> HashAlgorithm:
    """Resolves an algorithm by its CLI name."""
    if name == "xxh64":
        return XXHashAlgorithmImpl(64)
    if name == "xxh128":
        return XXHashAlgorithmImpl(128)
    if name == "md5":
        return MD5AlgorithmImpl()
    raise ConfigError(f"Unknown hash algorithm '{name}'")


class HasherImpl:
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Stateless between calls, so one instance is shared by all hash workers.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.chunk_size = chunk_size

    def compute_full_hash(self, entry: FileEntry) -> bytes:
        """
        Reads the whole file in chunks and returns its digest.
        Raises HashError if the file cannot be read.
        """
        state = self.algorithm.new()
        try:
            with open(entry.path, 'rb') as f:
                for chunk in iter(lambda: f.read(self.chunk_size), b''):
                    state.update(chunk)
        except OSError as e:
            raise HashError(entry.path, e.strerror or str(e)) from e
        return state.digest()
