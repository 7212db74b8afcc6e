from __future__ import annotations

"""
Main Entry Point.

Routes execution to the CLI controller and makes sure an unexpected crash
is logged before the process exits.
"""

import logging
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    from zipsync.interface.cli.app import main as cli_main

    try:
        return cli_main(argv)
    except Exception as e:
        logging.getLogger("zipsync.supervisor").critical(f"FATAL EXCEPTION DETECTED: {e}", exc_info=True)
        print(f"CRITICAL ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
