from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging initialization, configuration
resolution (defaults, saved configuration and CLI overrides), pipeline
execution with live upload progress, and result rendering.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, TextIO

from zipsync.core.pipeline.engine import run_pipeline
from zipsync.core.pipeline.validator import validate_config
from zipsync.domain.config import get_default_config, load_config, save_config
from zipsync.domain.pipeline_models import PipelineResult
from zipsync.domain.upload_models import ProgressUpdate
from zipsync.infra.logging import LoggingConfig, configure_logging, get_logger
from zipsync.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 pipeline failure, 2 invalid input,
             130 interrupted).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))
    logger.debug("CLI execution initiated. Resolving configuration...")

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))

    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.save_config:
        save_config(clean_conf)

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    if not clean_conf["archive_path"]:
        print("ERROR: no archive given (use --archive).", file=sys.stderr)
        return 2

    printer = ProgressPrinter(sys.stdout) if not args.json_output else None
    try:
        result = run_pipeline(
            clean_conf,
            progress_callback=printer,
            tree_stream=sys.stderr if args.json_output else None,
        )
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130

    if printer is not None:
        printer.finish()

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1

# -----------------------------------------------------------------------------
# PROGRESS REPORTING
# -----------------------------------------------------------------------------

class ProgressPrinter:
    """Rewrites a single terminal line with the latest upload progress."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._dirty = False

    def __call__(self, update: ProgressUpdate) -> None:
        self._stream.write("\r" + update.format_line())
        self._stream.flush()
        self._dirty = True

    def finish(self) -> None:
        if self._dirty:
            self._stream.write("\n")
            self._dirty = False

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay the non-None overrides on top of base."""
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _print_human_summary(result: PipelineResult) -> None:
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    extraction = result.extraction
    print(f"Extracted {extraction.get('files_written', 0)} files "
          f"({extraction.get('nested_archives', 0)} nested archives) into {result.extract_path}")

    if result.upload:
        print(f"Uploaded directory {result.upload_path}")
        print(f"Total upload time: {result.upload.get('elapsed', 0.0):.2f}s")
