"""
Unit tests for HasherImpl and the hash algorithms.
"""
import hashlib

import pytest
import xxhash

from dupefindr.core import (
    HasherImpl, XXHashAlgorithmImpl, MD5AlgorithmImpl, get_algorithm,
    FileEntry, HashError, ConfigError,
)


def entry_for(path):
    return FileEntry(path=str(path), size=path.stat().st_size)


class TestHasherImpl:
    """Test full-content hashing."""

    def test_identical_content_identical_digest(self, abc_tree):
        hasher = HasherImpl()
        assert hasher.compute_full_hash(entry_for(abc_tree["a"])) == \
            hasher.compute_full_hash(entry_for(abc_tree["b"]))

    def test_different_content_different_digest(self, abc_tree):
        hasher = HasherImpl()
        assert hasher.compute_full_hash(entry_for(abc_tree["a"])) != \
            hasher.compute_full_hash(entry_for(abc_tree["c"]))

    def test_default_is_xxh64_of_whole_file(self, abc_tree):
        digest = HasherImpl().compute_full_hash(entry_for(abc_tree["a"]))
        assert digest == xxhash.xxh64(b"X" * 10).digest()

    def test_chunk_size_does_not_change_digest(self, temp_dir):
        """Streaming in small chunks must give the same digest as one read."""
        path = temp_dir / "big.bin"
        data = bytes(range(256)) * 40
        path.write_bytes(data)

        small = HasherImpl(chunk_size=7).compute_full_hash(entry_for(path))
        large = HasherImpl(chunk_size=1024 * 1024).compute_full_hash(entry_for(path))

        assert small == large == xxhash.xxh64(data).digest()

    def test_md5_algorithm(self, abc_tree):
        digest = HasherImpl(MD5AlgorithmImpl()).compute_full_hash(entry_for(abc_tree["a"]))
        assert digest == hashlib.md5(b"X" * 10).digest()

    def test_xxh128_algorithm(self, abc_tree):
        digest = HasherImpl(XXHashAlgorithmImpl(128)).compute_full_hash(entry_for(abc_tree["a"]))
        assert len(digest) == 16

    def test_missing_file_raises_hash_error(self, temp_dir):
        entry = FileEntry(path=str(temp_dir / "gone.bin"), size=10)
        with pytest.raises(HashError) as exc_info:
            HasherImpl().compute_full_hash(entry)
        assert exc_info.value.path == entry.path
        assert exc_info.value.kind == "hash"


class TestGetAlgorithm:
    @pytest.mark.parametrize("name", ["xxh64", "xxh128", "md5"])
    def test_known_names(self, name):
        assert get_algorithm(name).name == name

    def test_unknown_name(self):
        with pytest.raises(ConfigError):
            get_algorithm("sha1")

    def test_xxhash_rejects_unsupported_width(self):
        with pytest.raises(ValueError):
            XXHashAlgorithmImpl(32)
