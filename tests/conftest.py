from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Archive factories and an in-memory object store shared across tests.
"""

import io
import os
import sys
import threading
import zipfile
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Sequence, Tuple, Union

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from zipsync.domain.errors import StorageError  # noqa: E402

# (name, content or None for a directory, optional unix mode)
ZipEntrySpec = Union[Tuple[str, Optional[bytes]], Tuple[str, Optional[bytes], int]]


def build_zip_bytes(entries: Sequence[ZipEntrySpec]) -> bytes:
    """Assemble a zip archive in memory, keeping entry names verbatim."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for spec in entries:
            name, data = spec[0], spec[1]
            info = zipfile.ZipInfo(name)
            info.compress_type = zipfile.ZIP_DEFLATED
            if data is None:
                mode = spec[2] if len(spec) > 2 else 0o755
                info.external_attr = (0o040000 | mode) << 16 | 0x10
                zf.writestr(info, b"")
            else:
                mode = spec[2] if len(spec) > 2 else 0o644
                if not (mode >> 12):
                    mode |= 0o100000
                info.external_attr = mode << 16
                zf.writestr(info, data)
    return buffer.getvalue()


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a zip file built from entry specs."""
    def _make(name: str, entries: Sequence[ZipEntrySpec], directory: Optional[Path] = None) -> Path:
        target = (directory or tmp_path) / name
        target.write_bytes(build_zip_bytes(entries))
        return target
    return _make


def snapshot_tree(root: Path) -> Dict[str, bytes]:
    """Map every file under root (relative posix path) to its content."""
    result: Dict[str, bytes] = {}
    for path in sorted(root.rglob("*")):
        if path.is_file():
            result[path.relative_to(root).as_posix()] = path.read_bytes()
    return result


class FakeObjectStore:
    """
    In-memory object store recording every put attempt.

    Args:
        fail_on_call: 1-based index of the put call that should fail.
        fail_keys: Keys (or key prefixes) whose puts fail.
    """

    def __init__(self, fail_on_call: Optional[int] = None, fail_keys: Sequence[str] = ()) -> None:
        self.fail_on_call = fail_on_call
        self.fail_keys = tuple(fail_keys)
        self.calls: List[Tuple[str, str]] = []
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self._lock = threading.Lock()

    def put(self, bucket: str, key: str, stream: BinaryIO) -> None:
        with self._lock:
            self.calls.append((bucket, key))
            call_number = len(self.calls)
        if call_number == self.fail_on_call or key.startswith(self.fail_keys or ("\0",)):
            raise StorageError(f"simulated failure for {key}", bucket, key)
        data = stream.read()
        with self._lock:
            self.objects[(bucket, key)] = data

    @property
    def keys(self) -> List[str]:
        return [key for _, key in self.objects]


@pytest.fixture
def fake_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def store_factory() -> Callable[..., FakeObjectStore]:
    return FakeObjectStore


@pytest.fixture
def zip_bytes() -> Callable[[Sequence[ZipEntrySpec]], bytes]:
    return build_zip_bytes


@pytest.fixture
def tree_snapshot() -> Callable[[Path], Dict[str, bytes]]:
    return snapshot_tree
