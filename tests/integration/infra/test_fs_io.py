from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates path normalization, data directory resolution and the sandbox
containment helpers used by the extractor.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from zipsync.infra.fs import (
    get_user_data_dir,
    is_unsafe_member_name,
    is_within_root,
    normalize_path,
)


def test_get_user_data_dir_unix() -> None:
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value="/home/testuser"):
            with patch("os.makedirs"):
                path = get_user_data_dir()
    assert path.replace("\\", "/").endswith("/home/testuser/.zipsync")


def test_normalize_path_expansion() -> None:
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path("$TEST_VAR/sub", fallback=".")
        assert path.lower().endswith(os.path.join("my_folder", "sub").lower())


def test_normalize_path_fallback(tmp_path: Path) -> None:
    assert normalize_path("   ", fallback=str(tmp_path)) == str(tmp_path)


@pytest.mark.parametrize("name, unsafe", [
    ("/etc/passwd", True),
    ("\\windows\\system32", True),
    ("C:evil", True),
    ("D:/evil", True),
    ("\\\\host\\share\\x", True),
    ("relative/path.txt", False),
    ("../still-relative", False),
    ("", False),
])
def test_is_unsafe_member_name(name: str, unsafe: bool) -> None:
    assert is_unsafe_member_name(name) is unsafe


def test_is_within_root(tmp_path: Path) -> None:
    root = str(tmp_path / "root")
    assert is_within_root(os.path.join(root, "a", "b"), root)
    assert not is_within_root(root, root)
    assert not is_within_root(str(tmp_path / "root-sibling" / "x"), root)
    assert not is_within_root(os.path.join(root, "..", "x"), root)

