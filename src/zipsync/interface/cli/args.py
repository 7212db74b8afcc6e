from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed arguments into
configuration overrides understood by the pipeline.
"""

import argparse
from typing import Any, Dict

from zipsync.domain.constants import STORAGE_BACKENDS
from zipsync.infra.logging import get_default_log_path

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the ZipSync CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="zipsync",
        description="Extract a nested archive, print its directory tree and upload it to an object store.",
    )

    # --- Paths ---
    p.add_argument("-a", "--archive", dest="archive_path", default=None,
                   help="Archive to extract.")
    p.add_argument("-o", "--extract-to", dest="extract_path", default=None,
                   help="Extraction root directory.")
    p.add_argument("--upload-dir", dest="upload_path", default=None,
                   help="Directory to upload (defaults to the extraction root).")

    # --- Object Store ---
    p.add_argument("-b", "--bucket", dest="bucket_name", default=None,
                   help="Destination bucket.")
    p.add_argument("--prefix", dest="key_prefix", default=None,
                   help="Prefix prepended to every object key.")
    p.add_argument("--region", dest="region", default=None,
                   help="Object store region.")
    p.add_argument("--backend", dest="storage_backend", choices=STORAGE_BACKENDS, default=None,
                   help="Storage backend.")
    p.add_argument("--endpoint", dest="endpoint_url", default=None,
                   help="Custom endpoint URL (required for the http backend).")
    p.add_argument("--timeout", dest="upload_timeout", type=float, default=None,
                   help="Per-request upload timeout in seconds.")

    # --- Extraction ---
    p.add_argument("--max-depth", dest="max_nesting_depth", type=int, default=None,
                   help="Maximum nested archive depth.")

    # --- Stages ---
    p.add_argument("--no-tree", action="store_true", help="Do not print the directory tree.")
    p.add_argument("--skip-upload", action="store_true", help="Stop after extraction and tree output.")

    # --- Configuration and Diagnostics ---
    p.add_argument("--use-defaults", action="store_true",
                   help="Ignore the saved configuration.")
    p.add_argument("--save-config", action="store_true",
                   help="Persist the resolved configuration for later runs.")
    p.add_argument("--dump-config", action="store_true",
                   help="Print the resolved configuration as JSON and exit.")
    p.add_argument("--json", dest="json_output", action="store_true",
                   help="Print the result as JSON.")
    p.add_argument("--debug", action="store_true", help="Elevate logging verbosity to DEBUG.")
    p.add_argument("--log-file", dest="log_file", nargs="?", const=get_default_log_path(), default=None,
                   help="Also write logs to a rotating file (default location when no path is given).")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Values left as None mean "not given" and are ignored by the merge.
    """
    overrides: Dict[str, Any] = {
        "archive_path": args.archive_path,
        "extract_path": args.extract_path,
        "upload_path": args.upload_path,
        "bucket_name": args.bucket_name,
        "key_prefix": args.key_prefix,
        "region": args.region,
        "storage_backend": args.storage_backend,
        "endpoint_url": args.endpoint_url,
        "upload_timeout": args.upload_timeout,
        "max_nesting_depth": args.max_nesting_depth,
    }

    if args.no_tree:
        overrides["print_tree"] = False
    if args.skip_upload:
        overrides["skip_upload"] = True

    return overrides
