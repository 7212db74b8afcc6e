from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result structure and factory functions used to communicate
execution outcomes between the pipeline engine and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result object of a complete pipeline execution.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        stage: Stage that produced the failure ("extract", "tree", "upload").
        archive_path: Normalized archive that was processed.
        extract_path: Sandbox root the archive was unpacked into.
        upload_path: Directory handed to the upload stage.
        bucket_name: Destination bucket.
        key_prefix: Prefix applied to every object key.
        tree_lines: Rendered directory hierarchy.
        extraction: Extraction counters.
        upload: Upload counters and timing.
        summary: Technical execution summary.
    """
    ok: bool
    error: str
    stage: str

    archive_path: str
    extract_path: str
    upload_path: str
    bucket_name: str
    key_prefix: str

    tree_lines: List[str] = field(default_factory=list)
    extraction: Dict[str, Any] = field(default_factory=dict)
    upload: Dict[str, Any] = field(default_factory=dict)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        stage: str,
        cfg: Dict[str, Any],
        tree_lines: Optional[List[str]] = None,
        extraction: Optional[Dict[str, Any]] = None,
        upload: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """
    Create a failed pipeline result instance.

    Args:
        error: Detailed error description.
        stage: Pipeline stage where the run stopped.
        cfg: The configuration used during the failed run.
        tree_lines: Tree output produced before the failure, if any.
        extraction: Extraction counters produced before the failure, if any.
        upload: Upload counters produced before the failure, if any.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        stage=stage,
        archive_path=cfg.get("archive_path", ""),
        extract_path=cfg.get("extract_path", ""),
        upload_path=cfg.get("upload_path", ""),
        bucket_name=cfg.get("bucket_name", ""),
        key_prefix=cfg.get("key_prefix", ""),
        tree_lines=tree_lines or [],
        extraction=extraction or {},
        upload=upload or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        tree_lines: List[str],
        extraction: Dict[str, Any],
        upload: Dict[str, Any],
        summary_extra: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """
    Create a successful pipeline result instance.

    Args:
        cfg: Final configuration used during execution.
        tree_lines: Rendered directory hierarchy.
        extraction: Extraction counters.
        upload: Upload counters, empty when the upload was skipped.
        summary_extra: Final execution metrics.

    Returns:
        PipelineResult: An immutable success result object.
    """
    return PipelineResult(
        ok=True,
        error="",
        stage="done",
        archive_path=cfg.get("archive_path", ""),
        extract_path=cfg.get("extract_path", ""),
        upload_path=cfg.get("upload_path", ""),
        bucket_name=cfg.get("bucket_name", ""),
        key_prefix=cfg.get("key_prefix", ""),
        tree_lines=tree_lines,
        extraction=extraction,
        upload=upload,
        summary=summary_extra or {},
    )
