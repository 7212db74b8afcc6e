from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Invokes the entry point in a separate process and validates exit codes,
stream output and the extracted tree on disk.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"


def run_cli(args: List[str], cwd: Path) -> subprocess.CompletedProcess:
    """Execute 'python -m zipsync.main' with src on PYTHONPATH and an isolated home."""
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(cwd)
    env["USERPROFILE"] = str(cwd)

    cmd = [sys.executable, "-m", "zipsync.main"] + args
    return subprocess.run(cmd, cwd=cwd, env=env, capture_output=True, text=True, encoding="utf-8")


def test_cli_extracts_nested_archive_without_upload(tmp_path: Path, make_zip, zip_bytes) -> None:
    inner = zip_bytes([("lib/core.txt", b"core")])
    archive = make_zip("release.zip", [("app/bundle.zip", inner), ("app/run.sh", b"#!/bin/sh")])
    dest = tmp_path / "extracted"

    result = run_cli(["--use-defaults", "-a", str(archive), "-o", str(dest), "--skip-upload"], tmp_path)

    assert result.returncode == 0, result.stderr
    assert (dest / "app" / "lib" / "core.txt").read_bytes() == b"core"
    assert not (dest / "app" / "bundle.zip").exists()
    assert "    lib" in result.stdout


def test_cli_json_output(tmp_path: Path, make_zip) -> None:
    archive = make_zip("data.zip", [("x/y.txt", b"y")])

    result = run_cli(
        ["--use-defaults", "-a", str(archive), "-o", str(tmp_path / "o"), "--skip-upload", "--json"],
        tmp_path,
    )

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["ok"] is True
    assert payload["extraction"]["files_written"] == 1


def test_cli_rejects_traversal_archive(tmp_path: Path, make_zip) -> None:
    archive = make_zip("evil.zip", [("../../escape.txt", b"x")])

    result = run_cli(["--use-defaults", "-a", str(archive), "-o", str(tmp_path / "o"), "--skip-upload"], tmp_path)

    assert result.returncode == 1
    assert "escape.txt" in result.stderr
    assert not (tmp_path.parent / "escape.txt").exists()


def test_cli_writes_log_file(tmp_path: Path, make_zip) -> None:
    archive = make_zip("logged.zip", [("a/b.txt", b"b")])
    log_file = tmp_path / "logs" / "zipsync.log"

    result = run_cli(
        ["--use-defaults", "-a", str(archive), "-o", str(tmp_path / "o"), "--skip-upload",
         "--log-file", str(log_file)],
        tmp_path,
    )

    assert result.returncode == 0, result.stderr
    assert "Extraction finished" in log_file.read_text(encoding="utf-8")
