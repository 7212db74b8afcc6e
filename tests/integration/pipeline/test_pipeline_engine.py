from __future__ import annotations

"""
Integration tests for the Pipeline Engine.

Runs extraction, tree rendering and upload end to end against an in-memory
object store and checks that failures stop the run at the right stage.
"""

import io
import os
import threading
from pathlib import Path
from typing import Any, Dict, List

import pytest

from zipsync.core.pipeline.engine import run_pipeline
from zipsync.domain.upload_models import ProgressUpdate


@pytest.fixture
def nested_archive(tmp_path: Path, make_zip, zip_bytes) -> Path:
    inner = zip_bytes([("images/cat.png", b"png"), ("notes.txt", b"n")])
    return make_zip("bundle.zip", [
        ("docs/readme.md", b"# readme"),
        ("docs/inner.zip", inner),
        ("__MACOSX/docs/._readme.md", b"fork"),
    ])


def _config(archive: Path, dest: Path, **extra: Any) -> Dict[str, Any]:
    cfg = {
        "archive_path": str(archive),
        "extract_path": str(dest),
        "bucket_name": "my-bucket",
        "key_prefix": "uploads/",
    }
    cfg.update(extra)
    return cfg


def test_full_pipeline_uploads_extracted_tree(tmp_path: Path, nested_archive: Path, fake_store) -> None:
    dest = tmp_path / "extracted"
    tree_out = io.StringIO()
    updates: List[ProgressUpdate] = []

    result = run_pipeline(
        _config(nested_archive, dest),
        client=fake_store,
        progress_callback=updates.append,
        tree_stream=tree_out,
    )

    assert result.ok is True, result.error
    assert sorted(fake_store.keys) == [
        "uploads/docs/images/cat.png",
        "uploads/docs/notes.txt",
        "uploads/docs/readme.md",
    ]
    assert all(bucket == "my-bucket" for bucket, _ in fake_store.calls)
    assert result.extraction["nested_archives"] == 1
    assert result.upload["uploaded_files"] == 3
    assert len(updates) == 3

    assert result.tree_lines[0] == str(dest)
    assert "  docs" in result.tree_lines
    assert "    images" in result.tree_lines
    assert tree_out.getvalue().splitlines() == result.tree_lines


def test_print_tree_can_be_disabled(tmp_path: Path, nested_archive: Path, fake_store) -> None:
    tree_out = io.StringIO()

    result = run_pipeline(
        _config(nested_archive, tmp_path / "out", print_tree=False),
        client=fake_store,
        tree_stream=tree_out,
    )

    assert result.ok is True
    assert tree_out.getvalue() == ""
    assert result.tree_lines


def test_upload_path_overrides_extract_path(tmp_path: Path, nested_archive: Path, fake_store) -> None:
    dest = tmp_path / "out"

    result = run_pipeline(
        _config(nested_archive, dest, upload_path=str(dest / "docs" / "images")),
        client=fake_store,
        tree_stream=io.StringIO(),
    )

    assert result.ok is True
    assert fake_store.keys == ["uploads/cat.png"]


def test_extraction_failure_skips_upload(tmp_path: Path, make_zip, fake_store) -> None:
    evil = make_zip("evil.zip", [("../outside.txt", b"x")])

    result = run_pipeline(_config(evil, tmp_path / "out"), client=fake_store, tree_stream=io.StringIO())

    assert result.ok is False
    assert result.stage == "extract"
    assert "outside.txt" in result.error
    assert fake_store.calls == []


def test_missing_archive_path(fake_store) -> None:
    result = run_pipeline({"bucket_name": "b"}, client=fake_store)

    assert result.ok is False
    assert result.stage == "extract"


def test_upload_failure_is_reported(tmp_path: Path, nested_archive: Path, store_factory) -> None:
    store = store_factory(fail_on_call=1)

    result = run_pipeline(_config(nested_archive, tmp_path / "out"), client=store, tree_stream=io.StringIO())

    assert result.ok is False
    assert result.stage == "upload"
    assert result.upload["failed_path"] is not None
    assert len(store.calls) == 1
    assert result.extraction["files_written"] >= 3


def test_missing_bucket_fails_before_upload(tmp_path: Path, nested_archive: Path, fake_store) -> None:
    result = run_pipeline(
        _config(nested_archive, tmp_path / "out", bucket_name=""),
        client=fake_store,
        tree_stream=io.StringIO(),
    )

    assert result.ok is False
    assert result.stage == "upload"
    assert fake_store.calls == []


def test_skip_upload(tmp_path: Path, nested_archive: Path, fake_store) -> None:
    dest = tmp_path / "out"

    result = run_pipeline(
        _config(nested_archive, dest, skip_upload=True, bucket_name=""),
        client=fake_store,
        tree_stream=io.StringIO(),
    )

    assert result.ok is True
    assert result.upload == {}
    assert fake_store.calls == []
    assert (dest / "docs" / "notes.txt").exists()
    assert not os.path.exists(dest / "__MACOSX")


def test_cancelled_run_stops_during_extraction(tmp_path: Path, nested_archive: Path, fake_store) -> None:
    event = threading.Event()
    event.set()

    result = run_pipeline(
        _config(nested_archive, tmp_path / "out"),
        client=fake_store,
        cancel_event=event,
    )

    assert result.ok is False
    assert result.stage == "extract"
    assert fake_store.calls == []
