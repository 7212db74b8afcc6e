from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates the whole workflow:
1. Validates configuration and normalizes paths.
2. Extracts the archive (and nested archives) into the extraction root.
3. Builds and renders the resulting directory hierarchy.
4. Uploads the extracted tree on a worker thread and waits for it.

The first fatal error in extraction or tree building stops the run before
anything is uploaded.
"""

import logging
import os
import threading
from dataclasses import asdict
from typing import Any, Dict, List, Optional, TextIO

from zipsync.core.analysis.tree_builder import build_directory_tree
from zipsync.core.analysis.tree_renderer import print_tree, render_tree_lines
from zipsync.core.extraction.extractor import extract_archive
from zipsync.core.pipeline.validator import validate_config
from zipsync.core.upload.coordinator import ProgressCallback, upload_directories
from zipsync.domain.constants import DEFAULT_EXTRACT_SUBDIR
from zipsync.domain.errors import ZipSyncError
from zipsync.domain.pipeline_models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from zipsync.domain.upload_models import UploadJob
from zipsync.infra.fs import normalize_path
from zipsync.infra.storage import ObjectStoreClient, create_object_store_client

logger = logging.getLogger(__name__)


def run_pipeline(
        config: Optional[Dict[str, Any]],
        *,
        client: Optional[ObjectStoreClient] = None,
        progress_callback: Optional[ProgressCallback] = None,
        tree_stream: Optional[TextIO] = None,
        cancel_event: Optional[threading.Event] = None,
) -> PipelineResult:
    """
    Execute the extract, tree and upload stages.

    Args:
        config: The configuration dictionary (raw or partial).
        client: Object store to use; built from the configuration when omitted.
        progress_callback: Receives per-file upload progress.
        tree_stream: Destination of the printed tree (stdout by default).
        cancel_event: Optional event that stops extraction and upload early.

    Returns:
        PipelineResult: Object containing status, counters and tree lines.
    """
    logger.info("Pipeline execution started.")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    if not cfg["archive_path"]:
        msg = "No archive path configured."
        logger.error(msg)
        return create_error_result(msg, "extract", cfg)

    cfg["archive_path"] = normalize_path(cfg["archive_path"], os.getcwd())
    cfg["extract_path"] = normalize_path(
        cfg["extract_path"], os.path.join(os.getcwd(), DEFAULT_EXTRACT_SUBDIR)
    )
    cfg["upload_path"] = normalize_path(cfg["upload_path"], cfg["extract_path"])

    # -------------------------------------------------------------------------
    # 2) Extraction
    # -------------------------------------------------------------------------
    try:
        extraction = extract_archive(
            cfg["archive_path"],
            cfg["extract_path"],
            max_depth=cfg["max_nesting_depth"],
            cancel_event=cancel_event,
        )
    except ZipSyncError as e:
        msg = f"Error extracting archive: {e}"
        logger.error(msg)
        return create_error_result(msg, "extract", cfg)

    extraction_stats = asdict(extraction)

    # -------------------------------------------------------------------------
    # 3) Tree Building & Rendering
    # -------------------------------------------------------------------------
    try:
        tree = build_directory_tree(cfg["extract_path"])
    except ZipSyncError as e:
        msg = f"Error building tree: {e}"
        logger.error(msg)
        return create_error_result(msg, "tree", cfg, extraction=extraction_stats)

    tree_lines: List[str] = render_tree_lines(tree)
    if cfg["print_tree"]:
        print_tree(tree, stream=tree_stream)

    # -------------------------------------------------------------------------
    # 4) Upload
    # -------------------------------------------------------------------------
    if cfg["skip_upload"]:
        logger.info("Upload skipped by configuration.")
        return create_success_result(
            cfg, tree_lines, extraction_stats, {},
            summary_extra={"uploaded": False},
        )

    if not cfg["bucket_name"]:
        msg = "No bucket name configured for upload."
        logger.error(msg)
        return create_error_result(msg, "upload", cfg, tree_lines, extraction_stats)

    if client is None:
        try:
            client = create_object_store_client(cfg)
        except (ValueError, ZipSyncError) as e:
            msg = f"Failed to create object store client: {e}"
            logger.error(msg)
            return create_error_result(msg, "upload", cfg, tree_lines, extraction_stats)

    job = UploadJob(directory_path=cfg["upload_path"], key_prefix=cfg["key_prefix"])
    upload = upload_directories(
        client, cfg["bucket_name"], [job],
        max_workers=1,
        progress_callback=progress_callback,
        cancel_event=cancel_event,
    )[0]
    upload_stats = asdict(upload)

    if not upload.ok:
        msg = f"Error uploading directory {upload.directory_path}: {upload.error}"
        return create_error_result(msg, "upload", cfg, tree_lines, extraction_stats, upload_stats)

    logger.info("Pipeline completed successfully.")
    return create_success_result(
        cfg, tree_lines, extraction_stats, upload_stats,
        summary_extra={"uploaded": True, "elapsed": upload.elapsed},
    )
