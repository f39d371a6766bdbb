"""
Shared fixtures for dupefindr tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def abc_tree(temp_dir) -> Dict[str, Path]:
    """
    a.txt and b.txt share content, c.txt has the same size but other content.
    """
    files = {
        "a": temp_dir / "a.txt",
        "b": temp_dir / "b.txt",
        "c": temp_dir / "c.txt",
    }
    files["a"].write_bytes(b"X" * 10)
    files["b"].write_bytes(b"X" * 10)
    files["c"].write_bytes(b"Y" * 10)
    return files


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for detection scenarios:

        .hidden.txt       X*10   (hidden copy of a.txt)
        a.txt             X*10
        b.txt             X*10
        c.txt             Y*10   (same size as a.txt, other content)
        empty1.txt        empty
        empty2.txt        empty
        ignore.tmp        X*10   (dropped by an exclusion of '*.tmp')
        subdir/a_copy.txt X*10
        subdir/big1.bin   B*2048
        subdir/big2.bin   B*2048
        unique.txt        C*1500
    """
    files = {}

    content_x = b"X" * 10
    for key, name in [("hidden", ".hidden.txt"), ("a", "a.txt"), ("b", "b.txt"), ("tmp", "ignore.tmp")]:
        files[key] = temp_dir / name
        files[key].write_bytes(content_x)

    files["c"] = temp_dir / "c.txt"
    files["c"].write_bytes(b"Y" * 10)

    files["empty1"] = temp_dir / "empty1.txt"
    files["empty1"].write_bytes(b"")
    files["empty2"] = temp_dir / "empty2.txt"
    files["empty2"].write_bytes(b"")

    files["unique"] = temp_dir / "unique.txt"
    files["unique"].write_bytes(b"C" * 1500)

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_a"] = subdir / "a_copy.txt"
    files["sub_a"].write_bytes(content_x)
    files["big1"] = subdir / "big1.bin"
    files["big1"].write_bytes(b"B" * 2048)
    files["big2"] = subdir / "big2.bin"
    files["big2"].write_bytes(b"B" * 2048)

    return files
