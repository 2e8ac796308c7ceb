from __future__ import annotations

import logging
import sys


def configure_logging(*, verbose: bool, quiet: bool) -> None:
    """
    Configure process-wide logging defaults for CLI usage.

    - Default: INFO
    - --verbose: DEBUG
    - --quiet: WARNING

    Logs go to stderr so they never mix with JSON written to stdout.
    """

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    fmt = "lintel: %(message)s"
    if verbose:
        fmt = "lintel [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)
